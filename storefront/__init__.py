"""
                Restaurant Storefront

Ordering storefront and admin panel core: per-category product options,
price computation, cart aggregation and order submission, with a hybrid
Mock/Real collaborator architecture for the catalog API and messaging.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"
