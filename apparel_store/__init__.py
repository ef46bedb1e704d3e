# apparel_store: pricing and totals service for the custom apparel storefront
