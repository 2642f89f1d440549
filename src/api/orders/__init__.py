"""Orders bounded context.

Places and cancels orders. Every state change is written together with its
domain events to the transactional outbox.
"""
