# Storefront merchant service
