"""
Basic usage example of fastapi-request-context.

Demonstrates:
- Using context_dependency as a FastAPI dependency
- Restricting requests to an allow-list of Host headers
- Content negotiation and Basic authentication from the context
- Building redirect targets with the URL model
"""

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse, RedirectResponse

from fastapi_request_context import RequestContext, context_dependency

app = FastAPI(title="Basic Request Context Example")

request_context = context_dependency(allowed_hosts=["localhost:8000", "127.0.0.1:8000"])


@app.get("/greeting")
async def greeting(ctx: RequestContext = Depends(request_context)):
    """Answer in the client's preferred language and format."""
    language = ctx.negotiate_language(["en", "pt-br"])
    text = "Hello!" if language == "en" else "Olá!"
    if ctx.negotiate_accept(["application/json", "text/plain"]) == "text/plain":
        return PlainTextResponse(text, headers={"Content-Language": language})
    return {"message": text, "language": language, "request_id": ctx.request_id}


@app.get("/admin")
async def admin(ctx: RequestContext = Depends(request_context)):
    """Protected endpoint - requires Basic authentication."""
    creds = ctx.basic_auth
    if creds is None or (creds.username, creds.password) != ("admin", "secret"):
        raise HTTPException(
            status_code=401, headers={"WWW-Authenticate": 'Basic realm="admin"'}
        )
    return {"user": creds.username, "from": ctx.proxied_ip or ctx.ip}


@app.get("/search")
async def search(ctx: RequestContext = Depends(request_context)):
    """Drop unknown query parameters by redirecting to a canonical URL."""
    canonical = ctx.url.copy().set_query_data(ctx.url.get_query_data(), only=["q", "page"])
    if canonical != ctx.url:
        return RedirectResponse(str(canonical), status_code=301)
    return {"query": ctx.url.get_query_data(), "back": str(ctx.referer) if ctx.referer else None}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)

    # Test with:
    # curl -H "Accept-Language: pt-BR" http://localhost:8000/greeting
    # curl -u admin:secret http://localhost:8000/admin
    # curl -i "http://localhost:8000/search?q=shoes&utm_source=mail"
