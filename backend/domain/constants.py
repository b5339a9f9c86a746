"""
Domain constants used across services/routers.
"""

# Stripe session metadata keys (round-tripped verbatim to the webhook)
METADATA_PRODUCT_ID = "productId"
METADATA_ASSET_ID = "prodigiAssetId"
METADATA_IMAGE_URL = "imageUrl"
METADATA_IMAGE_KEY = "imageKey"

# Stripe event that triggers fulfillment
CHECKOUT_COMPLETED_EVENT = "checkout.session.completed"

# Countries Stripe Checkout collects shipping addresses for
ALLOWED_SHIPPING_COUNTRIES = ["US", "CA", "GB", "AU", "DE", "FR", "IT", "ES", "NL", "BE"]

# Prodigi
PRODIGI_PRINT_AREA = "default"

# Stripe rejects metadata values longer than this
STRIPE_METADATA_VALUE_MAX_LENGTH = 500
