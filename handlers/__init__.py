"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler parses a command, delegates to the
appropriate Service through the AppContext, and sends the response back.
No business logic lives here.
"""
