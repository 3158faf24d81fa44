"""
                Restaurant Ordering Backend

Restaurant ordering API with hosted checkout and payment intents
on top of Stripe, with a mock gateway for local development.

Author: Khalil_Bannouri
Version: 3.1.0
License: MIT
"""

__version__ = "3.1.0"
__author__ = "Khalil_Bannouri"
