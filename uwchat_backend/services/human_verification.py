import logging

import requests

from uwchat_backend.core.config import Settings
from uwchat_backend.core.exceptions import HumanVerificationUnavailable

logger = logging.getLogger(__name__)


class RecaptchaVerifier:
    def __init__(self, secret_key: str, verify_url: str, timeout: int = 10):
        self.secret_key = secret_key
        self.verify_url = verify_url
        self.timeout = timeout

    def verify(self, token: str, remote_ip: str | None = None) -> bool:
        if not token:
            return False

        data = {"secret": self.secret_key, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        try:
            r = requests.post(self.verify_url, data=data, timeout=self.timeout)
            r.raise_for_status()
            body = r.json()
        except (requests.RequestException, ValueError) as exc:
            raise HumanVerificationUnavailable(f"reCAPTCHA verification failed: {exc}") from exc

        ok = bool(body.get("success"))
        if not ok:
            logger.info("reCAPTCHA rejected token", extra={"error_codes": ",".join(body.get("error-codes") or [])})
        return ok


class AllowAllVerifier:
    """Used when RECAPTCHA_ENABLED is off (local development)."""

    def verify(self, token: str, remote_ip: str | None = None) -> bool:
        return True


def build_verifier(settings: Settings):
    if not settings.RECAPTCHA_ENABLED:
        logger.warning("Human verification is disabled")
        return AllowAllVerifier()
    return RecaptchaVerifier(
        settings.RECAPTCHA_SECRET_KEY,
        settings.RECAPTCHA_VERIFY_URL,
        timeout=settings.RECAPTCHA_TIMEOUT,
    )
