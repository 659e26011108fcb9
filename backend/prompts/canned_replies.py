# Role: Fixed assistant texts that never come from the model: the opening greeting and the two
# user-facing fallbacks the gateway substitutes when the model gives nothing usable.

GREETING_MESSAGE = "Namaste! I'm your MOKSH Agri-Assistant. How can I help you save water today?"

# EmptyReply: the service answered but without text.
EMPTY_REPLY_MESSAGE = "I'm sorry, I couldn't process that. Please try again."

# GatewayUnavailable: network, protocol or service-side failure.
CONNECTION_ERROR_MESSAGE = "Connection error. Please check your internet and try again."
