# Bind & workers
bind = "0.0.0.0:8000"
# Refresh tokens live in process memory unless REDIS_URL is set: keep one
# worker in that mode, scale with threads.
workers = 1
threads = 4
timeout = 30
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr; the app emits JSON lines on stdout
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Trust proxy headers (paired with ProxyFix in the app)
forwarded_allow_ips = "*"
proxy_protocol = False

wsgi_app = "auth_service:create_app()"
