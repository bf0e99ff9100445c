from fastapi import HTTPException, Request
from jose import JWTError, jwt
import os
import logging
import httpx

logger = logging.getLogger("studyhub.auth")


def _settings() -> dict:
    return {
        "jwt_secret": os.getenv("SUPABASE_JWT_SECRET"),
        "url": os.getenv("SUPABASE_URL"),
        "api_key": os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY"),
        "environment": os.getenv("ENV", "development").lower(),
        "allow_unverified": str(os.getenv("ALLOW_UNVERIFIED_JWT_DEV", "false")).strip().lower() in {"1", "true", "yes", "on"},
    }


async def _verify_with_supabase_async(token: str, url: str | None, api_key: str | None) -> str | None:
    if not url or not api_key:
        return None

    endpoint = f"{url.rstrip('/')}/auth/v1/user"
    try:
        async with httpx.AsyncClient(timeout=6.0) as client:
            response = await client.get(
                endpoint,
                headers={
                    "Authorization": f"Bearer {token}",
                    "apikey": api_key,
                },
            )
    except httpx.HTTPError as exc:
        logger.warning("supabase token check failed | err=%s", exc)
        return None

    if response.status_code != 200:
        return None

    try:
        data = response.json()
    except ValueError:
        return None

    user_id = data.get("id")
    return str(user_id) if user_id else None


async def resolve_user_id_from_token_async(token: str) -> str:
    settings = _settings()
    payload = None
    if settings["jwt_secret"]:
        try:
            payload = jwt.decode(token, settings["jwt_secret"], algorithms=["HS256"], options={"verify_aud": False})
        except JWTError:
            raise HTTPException(401, "Invalid token")
    else:
        user_id = await _verify_with_supabase_async(token, settings["url"], settings["api_key"])
        if user_id:
            payload = {"sub": user_id}
        else:
            if settings["environment"] == "production":
                raise HTTPException(500, "SUPABASE_JWT_SECRET is not configured")
            if not settings["allow_unverified"]:
                raise HTTPException(
                    401,
                    "Token verification unavailable in development; configure SUPABASE_JWT_SECRET or set ALLOW_UNVERIFIED_JWT_DEV=true",
                )
            try:
                payload = jwt.get_unverified_claims(token)
                logger.warning("ALLOW_UNVERIFIED_JWT_DEV enabled; using unverified token claims in non-production mode")
            except JWTError:
                raise HTTPException(401, "Invalid token")

    user_id = (payload or {}).get("sub")
    if not user_id:
        raise HTTPException(401, "Invalid token")
    return str(user_id)


async def get_user_id_async(request: Request) -> str:
    auth = request.headers.get("Authorization")
    if not auth:
        raise HTTPException(401, "Unauthorized")

    if not auth.startswith("Bearer "):
        raise HTTPException(401, "Unauthorized")

    token = auth.replace("Bearer ", "", 1)
    return await resolve_user_id_from_token_async(token)
