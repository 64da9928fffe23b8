# HTTP and WebSocket API
