"""SellerService — catalog of seller companies and the services they offer."""
