"""
Saree Grace storefront API

REST backend for the storefront client: catalog, cart, checkout, orders,
reviews, testimonials and the admin dashboard. All data lives in memory
(see storage.py) and is gone when the process exits.
"""

import logging
from datetime import datetime

from flask import Flask, jsonify, request
from pydantic import ValidationError

from storefront import auth
from storefront.auth import admin_required, current_user, login_required, public_user
from storefront.config import APP_NAME, VERSION, configure_logging, load_settings
from storefront.schemas import (
    InsertCartItem,
    InsertCategory,
    InsertOrder,
    InsertProduct,
    InsertReview,
    InsertTestimonial,
    InsertUser,
    LoginRequest,
    validation_errors,
)
from storefront.seed import init_data
from storefront.storage import StorageError, storage

app = Flask(__name__)
app.config.from_mapping(load_settings())
configure_logging(app)

logger = logging.getLogger(__name__)

app.before_request(auth.load_current_user)


# ============== HELPERS ==============

def body():
    # missing, malformed or non-object JSON validates as an empty object
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def flag(name):
    return request.args.get(name) == 'true'


# ============== ROUTES ==============

@app.route('/health')
def health():
    return jsonify({
        'status': 'ok',
        'version': VERSION,
        'timestamp': datetime.now().isoformat()
    })

# ---------- AUTH ----------

@app.route('/api/auth/register', methods=['POST'])
def register():
    data = InsertUser.model_validate(body())

    if storage.get_user_by_username(data.username):
        return jsonify({'message': 'Username already taken'}), 400
    if storage.get_user_by_email(data.email):
        return jsonify({'message': 'Email already registered'}), 400

    record = data.to_record()
    record['password'] = auth.hash_password(data.password)
    user = storage.create_user(record)

    logger.info("Registered user %s (%s)", user['id'], user['username'])

    return jsonify(public_user(user)), 201

@app.route('/api/auth/login', methods=['POST'])
def login():
    try:
        creds = LoginRequest.model_validate(body())
    except ValidationError:
        return jsonify({'message': 'Missing credentials'}), 400

    user = auth.authenticate(creds.username, creds.password)
    if user is None:
        return jsonify({'message': 'Unauthorized'}), 401

    auth.login_user(user)
    logger.info("User %s logged in", user['id'])

    return jsonify(public_user(user))

@app.route('/api/auth/logout', methods=['POST'])
def logout():
    user = current_user()
    auth.logout_user()
    if user:
        logger.info("User %s logged out", user['id'])
    return jsonify({'message': 'Logged out successfully'})

@app.route('/api/auth/user', methods=['GET'])
def get_current_user():
    user = current_user()
    if not user:
        return jsonify({'message': 'Not authenticated'}), 401
    return jsonify(public_user(user))

# ---------- CATEGORIES ----------

@app.route('/api/categories', methods=['GET'])
def list_categories():
    return jsonify(storage.get_all_categories())

@app.route('/api/categories/<int:cid>', methods=['GET'])
def get_category(cid):
    category = storage.get_category_by_id(cid)
    if not category:
        return jsonify({'message': 'Category not found'}), 404
    return jsonify(category)

@app.route('/api/categories', methods=['POST'])
@admin_required
def create_category():
    data = InsertCategory.model_validate(body())
    category = storage.create_category(data.to_record())
    logger.info("Created category %s (%s)", category['id'], category['slug'])
    return jsonify(category), 201

@app.route('/api/categories/<int:cid>', methods=['PUT'])
@admin_required
def update_category(cid):
    data = InsertCategory.model_validate(body())
    category = storage.update_category(cid, data.to_record())
    if not category:
        return jsonify({'message': 'Category not found'}), 404
    logger.info("Updated category %s", cid)
    return jsonify(category)

@app.route('/api/categories/<int:cid>', methods=['DELETE'])
@admin_required
def delete_category(cid):
    if not storage.delete_category(cid):
        return jsonify({'message': 'Category not found'}), 404
    logger.info("Deleted category %s", cid)
    return '', 204

# ---------- PRODUCTS ----------

@app.route('/api/products', methods=['GET'])
def list_products():
    products = storage.get_all_products(
        category_id=request.args.get('category', type=int),
        featured=flag('featured'),
        is_new_arrival=flag('newArrival'),
        is_best_seller=flag('bestSeller'),
        search=request.args.get('search'),
    )
    return jsonify(products)

@app.route('/api/products/<int:pid>', methods=['GET'])
def get_product(pid):
    product = storage.get_product_by_id(pid)
    if not product:
        return jsonify({'message': 'Product not found'}), 404
    return jsonify(product)

@app.route('/api/products', methods=['POST'])
@admin_required
def create_product():
    data = InsertProduct.model_validate(body())
    product = storage.create_product(data.to_record())
    logger.info("Created product %s (%s)", product['id'], product['name'])
    return jsonify(product), 201

@app.route('/api/products/<int:pid>', methods=['PUT'])
@admin_required
def update_product(pid):
    data = InsertProduct.model_validate(body())
    product = storage.update_product(pid, data.to_record())
    if not product:
        return jsonify({'message': 'Product not found'}), 404
    logger.info("Updated product %s", pid)
    return jsonify(product)

@app.route('/api/products/<int:pid>', methods=['DELETE'])
@admin_required
def delete_product(pid):
    if not storage.delete_product(pid):
        return jsonify({'message': 'Product not found'}), 404
    logger.info("Deleted product %s", pid)
    return '', 204

# ---------- REVIEWS ----------

@app.route('/api/products/<int:pid>/reviews', methods=['GET'])
def get_product_reviews(pid):
    return jsonify(storage.get_product_reviews(pid))

@app.route('/api/products/<int:pid>/reviews', methods=['POST'])
@login_required
def add_product_review(pid):
    user = current_user()
    data = InsertReview.model_validate({**body(), 'userId': user['id'], 'productId': pid})

    if not storage.get_product_by_id(pid):
        return jsonify({'message': 'Product not found'}), 404

    review = storage.create_review(data.to_record())
    logger.info("User %s reviewed product %s (%s stars)", user['id'], pid, review['rating'])
    return jsonify(review), 201

# ---------- CART ----------

@app.route('/api/cart', methods=['GET'])
@login_required
def get_cart():
    return jsonify(storage.get_cart_items(current_user()['id']))

@app.route('/api/cart', methods=['POST'])
@login_required
def add_to_cart():
    data = InsertCartItem.model_validate({**body(), 'userId': current_user()['id']})

    if not storage.get_product_by_id(data.product_id):
        return jsonify({'message': 'Product not found'}), 404

    item = storage.add_to_cart(data.to_record())
    return jsonify(item), 201

@app.route('/api/cart/<int:item_id>', methods=['PUT'])
@login_required
def update_cart_item(item_id):
    qty = body().get('quantity')

    # bool is an int subclass, reject it explicitly
    if not isinstance(qty, int) or isinstance(qty, bool) or qty < 1:
        return jsonify({'message': 'Quantity must be a positive number'}), 400

    item = storage.update_cart_item(current_user()['id'], item_id, qty)
    if not item:
        return jsonify({'message': 'Cart item not found'}), 404
    return jsonify(item)

@app.route('/api/cart/<int:item_id>', methods=['DELETE'])
@login_required
def remove_from_cart(item_id):
    if not storage.remove_from_cart(current_user()['id'], item_id):
        return jsonify({'message': 'Cart item not found'}), 404
    return '', 204

@app.route('/api/cart', methods=['DELETE'])
@login_required
def clear_cart():
    storage.clear_cart(current_user()['id'])
    return '', 204

# ---------- ORDERS ----------

@app.route('/api/orders', methods=['GET'])
@login_required
def list_orders():
    user = current_user()
    if user.get('isAdmin') and flag('all'):
        return jsonify(storage.get_all_orders())
    return jsonify(storage.get_user_orders(user['id']))

@app.route('/api/orders/<int:oid>', methods=['GET'])
@login_required
def get_order(oid):
    user = current_user()
    order = storage.get_order_by_id(oid)
    if not order:
        return jsonify({'message': 'Order not found'}), 404

    # owners see their own orders, admins see everything
    if order['userId'] != user['id'] and not user.get('isAdmin'):
        return jsonify({'message': 'Forbidden'}), 403

    return jsonify(order)

@app.route('/api/orders', methods=['POST'])
@login_required
def create_order():
    uid = current_user()['id']
    data = InsertOrder.model_validate({**body(), 'userId': uid})

    cart_items = storage.get_cart_items(uid)
    if not cart_items:
        return jsonify({'message': 'Cart is empty'}), 400

    order = storage.create_order(data.to_record(), cart_items)
    storage.clear_cart(uid)

    logger.info("User %s placed order %s for %.2f (%d lines)",
                uid, order['id'], order['total'], len(order['items']))

    return jsonify(order), 201

@app.route('/api/orders/<int:oid>/status', methods=['PUT'])
@admin_required
def update_order_status(oid):
    status = body().get('status')
    if not status or not isinstance(status, str):
        return jsonify({'message': 'Status is required'}), 400

    order = storage.get_order_by_id(oid)
    old_status = order['status'] if order else None

    order = storage.update_order_status(oid, status)
    if not order:
        return jsonify({'message': 'Order not found'}), 404

    if old_status != status:
        logger.info("Order %s status %s -> %s", oid, old_status, status)

    return jsonify(order)

# ---------- TESTIMONIALS ----------

@app.route('/api/testimonials', methods=['GET'])
def list_testimonials():
    return jsonify(storage.get_testimonials())

@app.route('/api/testimonials', methods=['POST'])
@admin_required
def create_testimonial():
    data = InsertTestimonial.model_validate(body())
    return jsonify(storage.create_testimonial(data.to_record())), 201

# ---------- ADMIN ----------

@app.route('/api/admin/stats', methods=['GET'])
@admin_required
def admin_stats():
    return jsonify(storage.get_admin_stats())

@app.route('/api/admin/users', methods=['GET'])
@admin_required
def admin_list_users():
    return jsonify([public_user(u) for u in storage.get_all_users()])

# ============== ERROR HANDLERS ==============

@app.errorhandler(ValidationError)
def validation_failed(e):
    return jsonify({'message': validation_errors(e)}), 400

@app.errorhandler(StorageError)
def storage_rule_broken(e):
    return jsonify({'message': str(e)}), 400

@app.errorhandler(404)
def not_found(e):
    return jsonify({'message': 'Not found'}), 404

@app.errorhandler(405)
def method_not_allowed(e):
    return jsonify({'message': 'Method not allowed'}), 405

@app.errorhandler(500)
def server_error(e):
    # log the real cause, never leak it to the client
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({'message': 'Server error'}), 500

# ============== STARTUP ==============

if app.config['SEED_DATA']:
    init_data(storage, app.config)


def main():
    print("=" * 50)
    print(f"{APP_NAME} storefront API v{VERSION}")
    print("=" * 50)
    print(f"Loaded {len(storage.products)} products in {len(storage.categories)} categories")
    print(f"Starting server on http://{app.config['HOST']}:{app.config['PORT']}")
    print("=" * 50)
    app.run(host=app.config['HOST'], port=app.config['PORT'], debug=app.config['ENV'] != 'production')


if __name__ == '__main__':
    main()
