"""
                        Services Module

Contains the business logic services with the hybrid architecture pattern.
Each service has Mock (development) and Real (production) implementations.

Services:
    - payment: Stripe checkout sessions and payment intents
"""
