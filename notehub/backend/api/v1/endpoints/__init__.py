# v1 endpoint routers
