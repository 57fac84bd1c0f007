"""Demo catalog and admin account loaded at startup when SEED_DATA is on."""

import logging

from storefront.auth import hash_password

logger = logging.getLogger(__name__)


def init_data(store, config):
    if store.categories or store.products:
        logger.info("Catalog already present, skipping demo data")
    else:
        _seed_catalog(store)
    _seed_admin(store, config)


def _seed_catalog(store):
    # categories
    silk = store.create_category({
        'name': 'Silk Sarees',
        'slug': 'silk',
        'description': 'Handwoven Kanjeevaram and Banarasi silks',
        'imageUrl': '/images/categories/silk.jpg',
    })
    cotton = store.create_category({
        'name': 'Cotton Sarees',
        'slug': 'cotton',
        'description': 'Breathable everyday cottons',
        'imageUrl': '/images/categories/cotton.jpg',
    })
    designer = store.create_category({
        'name': 'Designer Sarees',
        'slug': 'designer',
        'description': 'Contemporary drapes for parties and receptions',
        'imageUrl': '/images/categories/designer.jpg',
    })

    # products
    store.create_product({
        'name': 'Kanjeevaram Silk Saree',
        'description': 'Pure zari Kanjeevaram with temple border',
        'price': 12999.0,
        'discountPrice': 10999.0,
        'imageUrl': '/images/products/kanjeevaram.jpg',
        'images': ['/images/products/kanjeevaram.jpg', '/images/products/kanjeevaram-2.jpg'],
        'categoryId': silk['id'],
        'stock': 12,
        'featured': True,
        'isNewArrival': False,
        'isBestSeller': True,
    })
    store.create_product({
        'name': 'Banarasi Brocade Saree',
        'description': 'Rich brocade weave with meenakari motifs',
        'price': 8499.0,
        'discountPrice': None,
        'imageUrl': '/images/products/banarasi.jpg',
        'images': [],
        'categoryId': silk['id'],
        'stock': 8,
        'featured': True,
        'isNewArrival': True,
        'isBestSeller': False,
    })
    store.create_product({
        'name': 'Handloom Cotton Saree',
        'description': 'Soft handloom cotton for daily wear',
        'price': 1899.0,
        'discountPrice': 1499.0,
        'imageUrl': '/images/products/handloom-cotton.jpg',
        'images': [],
        'categoryId': cotton['id'],
        'stock': 40,
        'featured': False,
        'isNewArrival': False,
        'isBestSeller': True,
    })
    store.create_product({
        'name': 'Chanderi Cotton Silk Saree',
        'description': 'Lightweight Chanderi with butti work',
        'price': 3299.0,
        'discountPrice': None,
        'imageUrl': '/images/products/chanderi.jpg',
        'images': [],
        'categoryId': cotton['id'],
        'stock': 25,
        'featured': False,
        'isNewArrival': True,
        'isBestSeller': False,
    })
    store.create_product({
        'name': 'Sequined Georgette Saree',
        'description': 'Georgette drape with sequin embroidery',
        'price': 5999.0,
        'discountPrice': 4999.0,
        'imageUrl': '/images/products/georgette.jpg',
        'images': [],
        'categoryId': designer['id'],
        'stock': 15,
        'featured': True,
        'isNewArrival': True,
        'isBestSeller': False,
    })

    # testimonials
    store.create_testimonial({
        'name': 'Riya Sharma',
        'location': 'Delhi',
        'rating': 5,
        'comment': 'I ordered a traditional silk saree for my wedding and was amazed by the quality and craftsmanship.',
        'avatarInitials': 'RS',
        'avatarColor': 'bg-primary',
    })
    store.create_testimonial({
        'name': 'Ananya Patel',
        'location': 'Mumbai',
        'rating': 5,
        'comment': 'Fast delivery and excellent customer service. The color is exactly as shown on the website.',
        'avatarInitials': 'AP',
        'avatarColor': 'bg-secondary',
    })
    store.create_testimonial({
        'name': 'Kavya Reddy',
        'location': 'Bangalore',
        'rating': 4,
        'comment': 'The casual cotton sarees are perfect for everyday wear and the quality is outstanding for the price.',
        'avatarInitials': 'KR',
        'avatarColor': 'bg-accent',
    })

    logger.info("Seeded %d categories, %d products, %d testimonials",
                len(store.categories), len(store.products), len(store.testimonials))


def _seed_admin(store, config):
    username = config['ADMIN_USERNAME']
    if store.get_user_by_username(username) is not None:
        return
    if not config.get('ADMIN_PASSWORD'):
        logger.warning("ADMIN_PASSWORD not set, no admin account created for %s", username)
        return

    store.create_user({
        'username': username,
        'email': config['ADMIN_EMAIL'],
        'fullName': 'Store Admin',
        'password': hash_password(config['ADMIN_PASSWORD']),
        'isAdmin': True,
    })
    logger.info("Created admin account %s", username)
