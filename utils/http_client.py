import httpx

# Shared asynchronous HTTP client, closed by bot.py on shutdown
httpx_client = httpx.AsyncClient(timeout=httpx.Timeout(30.0))
