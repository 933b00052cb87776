"""
Webhook delivery module.

Payload construction, the HTTP transport, and the retrying dispatcher.
"""
