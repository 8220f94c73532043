import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from loguru import logger

from catalog_service.core.config import Settings, get_settings
from catalog_service.core.metrics import BASIC_AUTH_VALIDATION_TOTAL

basic_scheme = HTTPBasic()


def authentication_get_service_user(
    credentials: HTTPBasicCredentials = Depends(basic_scheme),
    settings: Settings = Depends(get_settings),
) -> str:
    logger.debug("Authenticating caller from Basic credentials (catalog service)")

    username_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        settings.SERVICE_USERNAME.encode("utf-8"),
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        settings.SERVICE_PASSWORD.encode("utf-8"),
    )

    if not (username_ok and password_ok):
        logger.warning(
            "Invalid Basic credentials received for username='{username}'",
            username=credentials.username,
        )
        BASIC_AUTH_VALIDATION_TOTAL.labels(
            service=settings.SERVICE_NAME,
            result="invalid",
        ).inc()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    BASIC_AUTH_VALIDATION_TOTAL.labels(
        service=settings.SERVICE_NAME,
        result="success",
    ).inc()
    return credentials.username
