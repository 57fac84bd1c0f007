"""
In-memory storage for the storefront.

Each entity type lives in its own dict keyed by an auto-incrementing integer
id. Records are plain dicts with camelCase keys, so route handlers can hand
them to jsonify as-is. Nothing is persisted.
"""

import logging
from datetime import datetime

from storefront.config import (
    FREE_SHIPPING_THRESHOLD,
    ORDER_STATUSES,
    RECENT_ORDERS_LIMIT,
    SHIPPING_FEE,
    TOP_PRODUCTS_LIMIT,
)

logger = logging.getLogger(__name__)

ENTITIES = (
    'users', 'categories', 'products', 'cart_items',
    'orders', 'order_items', 'reviews', 'testimonials',
)


class StorageError(Exception):
    """Base class for rule violations raised by the store."""


class EmptyCartError(StorageError):
    def __init__(self):
        super().__init__('Cart is empty')


class InvalidStatusError(StorageError):
    def __init__(self, status):
        super().__init__(f'Invalid status. Must be one of: {", ".join(ORDER_STATUSES)}')
        self.status = status


def _now():
    return datetime.now().isoformat()


def unit_price(product):
    """Price a customer pays for one unit right now."""
    return product.get('discountPrice') or product['price']


def calc_shipping(subtotal):
    if subtotal >= FREE_SHIPPING_THRESHOLD:
        return 0.0
    return SHIPPING_FEE


class MemStorage:

    def __init__(self):
        self.reset()

    def reset(self):
        for name in ENTITIES:
            setattr(self, name, {})
        self._ids = {name: 1 for name in ENTITIES}

    def _next_id(self, entity):
        nid = self._ids[entity]
        self._ids[entity] += 1
        return nid

    # ---------- USERS ----------

    def get_user(self, user_id):
        return self.users.get(user_id)

    def get_user_by_username(self, username):
        for u in self.users.values():
            if u['username'] == username:
                return u
        return None

    def get_user_by_email(self, email):
        email = email.lower()
        for u in self.users.values():
            if u['email'].lower() == email:
                return u
        return None

    def create_user(self, data):
        uid = self._next_id('users')
        user = {
            'id': uid,
            'username': data['username'],
            'email': data['email'],
            'fullName': data.get('fullName'),
            'password': data['password'],
            'isAdmin': bool(data.get('isAdmin', False)),
            'createdAt': _now(),
        }
        self.users[uid] = user
        return user

    def get_all_users(self):
        return list(self.users.values())

    # ---------- CATEGORIES ----------

    def get_all_categories(self):
        return list(self.categories.values())

    def get_category_by_id(self, category_id):
        return self.categories.get(category_id)

    def create_category(self, data):
        cid = self._next_id('categories')
        self.categories[cid] = {'id': cid, **data}
        return self.categories[cid]

    def update_category(self, category_id, data):
        if category_id not in self.categories:
            return None
        self.categories[category_id] = {'id': category_id, **data}
        return self.categories[category_id]

    def delete_category(self, category_id):
        # products keep their categoryId, nothing cascades
        return self.categories.pop(category_id, None) is not None

    # ---------- PRODUCTS ----------

    def get_all_products(self, category_id=None, featured=False, is_new_arrival=False,
                         is_best_seller=False, search=None):
        search = (search or '').strip().lower()

        result = []
        for p in self.products.values():
            if category_id is not None and p.get('categoryId') != category_id:
                continue
            if featured and not p.get('featured'):
                continue
            if is_new_arrival and not p.get('isNewArrival'):
                continue
            if is_best_seller and not p.get('isBestSeller'):
                continue
            if search:
                haystack = f"{p['name']} {p.get('description') or ''}".lower()
                if search not in haystack:
                    continue
            result.append(p)
        return result

    def get_product_by_id(self, product_id):
        return self.products.get(product_id)

    def create_product(self, data):
        pid = self._next_id('products')
        self.products[pid] = {
            'id': pid,
            **data,
            'rating': 0,
            'reviewCount': 0,
            'createdAt': _now(),
        }
        return self.products[pid]

    def update_product(self, product_id, data):
        p = self.products.get(product_id)
        if p is None:
            return None
        # review aggregates and creation time are owned by the store
        self.products[product_id] = {
            'id': product_id,
            **data,
            'rating': p['rating'],
            'reviewCount': p['reviewCount'],
            'createdAt': p['createdAt'],
        }
        return self.products[product_id]

    def delete_product(self, product_id):
        return self.products.pop(product_id, None) is not None

    # ---------- CART ----------

    def _with_product(self, item):
        return {**item, 'product': self.products.get(item['productId'])}

    def get_cart_items(self, user_id):
        return [
            self._with_product(item)
            for item in self.cart_items.values()
            if item['userId'] == user_id
        ]

    def add_to_cart(self, data):
        user_id = data['userId']
        product_id = data['productId']
        qty = data.get('quantity', 1)

        # same product again bumps the existing line
        for item in self.cart_items.values():
            if item['userId'] == user_id and item['productId'] == product_id:
                item['quantity'] += qty
                return self._with_product(item)

        iid = self._next_id('cart_items')
        self.cart_items[iid] = {
            'id': iid,
            'userId': user_id,
            'productId': product_id,
            'quantity': qty,
            'createdAt': _now(),
        }
        return self._with_product(self.cart_items[iid])

    def update_cart_item(self, user_id, item_id, quantity):
        item = self.cart_items.get(item_id)
        if item is None or item['userId'] != user_id:
            return None
        item['quantity'] = quantity
        return self._with_product(item)

    def remove_from_cart(self, user_id, item_id):
        item = self.cart_items.get(item_id)
        if item is None or item['userId'] != user_id:
            return False
        del self.cart_items[item_id]
        return True

    def clear_cart(self, user_id):
        to_remove = [iid for iid, item in self.cart_items.items() if item['userId'] == user_id]
        for iid in to_remove:
            del self.cart_items[iid]
        return True

    # ---------- ORDERS ----------

    def _newest_first(self, orders):
        return sorted(orders, key=lambda o: o['id'], reverse=True)

    def get_all_orders(self):
        return self._newest_first(self.orders.values())

    def get_user_orders(self, user_id):
        return self._newest_first(o for o in self.orders.values() if o['userId'] == user_id)

    def get_order_by_id(self, order_id):
        return self.orders.get(order_id)

    def create_order(self, data, cart_items):
        """
        Turn a cart into an order.

        Each line snapshots the unit price in effect now, so later price edits
        don't touch placed orders. Lines whose product was deleted are dropped.
        Stock is not checked or decremented.
        """
        lines = []
        for item in cart_items:
            product = self.products.get(item['productId'])
            if product is None:
                logger.warning("Dropping cart line %s: product %s no longer exists",
                               item['id'], item['productId'])
                continue
            lines.append((product, item['quantity']))

        if not lines:
            raise EmptyCartError()

        oid = self._next_id('orders')
        now = _now()

        order_items = []
        subtotal = 0
        for product, qty in lines:
            price = unit_price(product)
            subtotal += price * qty
            iid = self._next_id('order_items')
            self.order_items[iid] = {
                'id': iid,
                'orderId': oid,
                'productId': product['id'],
                'productName': product['name'],
                'quantity': qty,
                'price': price,
            }
            order_items.append(self.order_items[iid])

        subtotal = round(subtotal, 2)
        shipping = calc_shipping(subtotal)

        if data.get('total') is not None and round(data['total'], 2) != round(subtotal + shipping, 2):
            logger.info("Client total %s differs from computed %s, using computed",
                        data['total'], round(subtotal + shipping, 2))

        self.orders[oid] = {
            'id': oid,
            'userId': data['userId'],
            'items': order_items,
            'subtotal': subtotal,
            'shippingFee': shipping,
            'total': round(subtotal + shipping, 2),
            'status': 'pending',
            'shippingAddress': data['shippingAddress'],
            'paymentMethod': data['paymentMethod'],
            'statusHistory': [{'from': None, 'to': 'pending', 'changedAt': now}],
            'createdAt': now,
            'updatedAt': now,
        }
        return self.orders[oid]

    def update_order_status(self, order_id, status):
        if status not in ORDER_STATUSES:
            raise InvalidStatusError(status)

        order = self.orders.get(order_id)
        if order is None:
            return None

        old_status = order['status']
        if old_status == status:
            return order

        now = _now()
        order['status'] = status
        order['updatedAt'] = now
        order['statusHistory'].append({'from': old_status, 'to': status, 'changedAt': now})
        return order

    # ---------- REVIEWS ----------

    def get_product_reviews(self, product_id):
        result = [r for r in self.reviews.values() if r['productId'] == product_id]
        result.sort(key=lambda r: r['id'], reverse=True)
        return result

    def create_review(self, data):
        rid = self._next_id('reviews')
        user = self.users.get(data['userId'])
        self.reviews[rid] = {
            'id': rid,
            'productId': data['productId'],
            'userId': data['userId'],
            'userName': (user.get('fullName') or user['username']) if user else 'Anonymous',
            'rating': data['rating'],
            'comment': data['comment'],
            'createdAt': _now(),
        }

        # keep the product's aggregates in step
        product = self.products.get(data['productId'])
        if product is not None:
            ratings = [r['rating'] for r in self.reviews.values() if r['productId'] == product['id']]
            product['reviewCount'] = len(ratings)
            product['rating'] = round(sum(ratings) / len(ratings), 1)

        return self.reviews[rid]

    # ---------- TESTIMONIALS ----------

    def get_testimonials(self):
        return list(self.testimonials.values())

    def create_testimonial(self, data):
        tid = self._next_id('testimonials')
        self.testimonials[tid] = {'id': tid, **data}
        return self.testimonials[tid]

    # ---------- ADMIN ----------

    def get_admin_stats(self):
        orders = self.get_all_orders()
        live_orders = [o for o in orders if o['status'] != 'cancelled']

        product_sales = {}
        for o in live_orders:
            for item in o['items']:
                pid = item['productId']
                if pid not in product_sales:
                    product_sales[pid] = {'id': pid, 'name': item['productName'], 'sold': 0, 'revenue': 0}
                product_sales[pid]['sold'] += item['quantity']
                product_sales[pid]['revenue'] += item['quantity'] * item['price']

        top_products = sorted(product_sales.values(), key=lambda x: x['revenue'], reverse=True)
        top_products = top_products[:TOP_PRODUCTS_LIMIT]
        for p in top_products:
            # prefer the current name when the product still exists
            if p['id'] in self.products:
                p['name'] = self.products[p['id']]['name']
            p['revenue'] = round(p['revenue'], 2)

        return {
            'totalOrders': len(orders),
            'totalRevenue': round(sum(o['total'] for o in live_orders), 2),
            'totalCustomers': len([u for u in self.users.values() if not u.get('isAdmin')]),
            'totalProducts': len(self.products),
            'recentOrders': [
                {'id': o['id'], 'date': o['createdAt'], 'total': o['total'], 'status': o['status']}
                for o in orders[:RECENT_ORDERS_LIMIT]
            ],
            'topProducts': top_products,
        }


storage = MemStorage()
