"""
                        Services Module

Collaborators with the hybrid architecture pattern (Mock in development,
real implementation in staging/production) and the sessions built on
them.

Services:
    - api: product/order catalog API
    - messaging: order summary handoff
    - storefront: customer browsing, cart and checkout session
    - admin: back-office product and order session
"""
