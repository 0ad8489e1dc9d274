import logging

import firebase_admin
from firebase_admin import credentials, auth
from typing import Optional

from app.config import settings
from app.core.exceptions import AuthError


logger = logging.getLogger(__name__)

# Global Firebase app instance
firebase_app: Optional[firebase_admin.App] = None


def init_firebase():
    """Initialize Firebase Admin SDK."""
    global firebase_app

    if firebase_app is not None:
        return firebase_app

    # Check if Firebase credentials are configured
    if not settings.FIREBASE_PROJECT_ID or not settings.FIREBASE_CLIENT_EMAIL:
        logger.warning("Firebase credentials not configured - skipping initialization")
        return None

    # Create credentials from environment variables
    cred_dict = {
        "type": "service_account",
        "project_id": settings.FIREBASE_PROJECT_ID,
        "private_key": settings.FIREBASE_PRIVATE_KEY.replace("\\n", "\n"),
        "client_email": settings.FIREBASE_CLIENT_EMAIL,
        "token_uri": "https://oauth2.googleapis.com/token",
    }

    try:
        cred = credentials.Certificate(cred_dict)
        firebase_app = firebase_admin.initialize_app(cred)
        logger.info("Firebase initialized")
        return firebase_app
    except Exception as e:
        logger.error(f"Firebase initialization failed: {e}")
        return None


class FirebaseService:
    """
    Service for Firebase Authentication.
    Resolves bearer tokens to identities and keeps account fields in sync.
    """

    @property
    def is_configured(self) -> bool:
        return firebase_app is not None

    def verify_token(self, id_token: str) -> dict:
        """
        Verify a Firebase ID token and return its decoded claims.
        Raises AuthError if the token is invalid or auth is not configured.
        """
        if not self.is_configured:
            raise AuthError("User not authenticated")

        try:
            claims = auth.verify_id_token(id_token, app=firebase_app)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError,
                auth.RevokedIdTokenError, auth.UserDisabledError,
                auth.CertificateFetchError) as e:
            logger.info(f"Rejected ID token: {e}")
            raise AuthError("User not authenticated") from e

        if not claims.get("uid"):
            raise AuthError("User not authenticated")
        return claims

    def update_phone_number(self, user_id: str, phone: str) -> bool:
        """
        Push a new phone number to the auth account.
        Returns False when Firebase is not configured and nothing was sent.
        """
        if not self.is_configured:
            logger.warning("Firebase not configured - phone number stored locally only")
            return False

        auth.update_user(user_id, phone_number=phone, app=firebase_app)
        return True


# Singleton instance
firebase_service = FirebaseService()
