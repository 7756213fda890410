"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler turns an update into an
InboundMessage and delegates to the SubscriptionService.
No business logic lives here.
"""
