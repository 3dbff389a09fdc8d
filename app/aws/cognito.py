"""
AWS Cognito wrapper (sign up, confirm, login, sign out) using boto3.
"""
import base64
import hashlib
import hmac
import uuid
from typing import Any, Dict, Optional
from botocore.exceptions import ClientError
import logging

logger = logging.getLogger(__name__)


class CognitoIdentityProviderWrapper:
    """Thin layer over the cognito-idp client for the marketplace user pool."""

    def __init__(
        self,
        cognito_client,
        user_pool_id: str,
        client_id: str,
        client_secret: Optional[str] = None,
    ):
        self.cognito_client = cognito_client
        self.user_pool_id = user_pool_id
        self.client_id = client_id
        self.client_secret = client_secret

    def _secret_hash(self, username: str) -> Optional[str]:
        """SECRET_HASH = base64(HMAC-SHA256(client_secret, username + client_id))."""
        if not self.client_secret:
            return None
        digest = hmac.new(
            self.client_secret.encode("utf-8"),
            (username + self.client_id).encode("utf-8"),
            digestmod=hashlib.sha256,
        ).digest()
        return base64.b64encode(digest).decode()

    def sign_up(self, email: str, password: str, **user_attributes) -> Dict[str, Any]:
        """
        Register a user. The pool uses email as an alias, so the Cognito
        Username is a fresh UUID that we keep as users.cognito_username.

        Raises:
            ClientError: If sign up fails
        """
        username = str(uuid.uuid4())
        attributes = [{"Name": "email", "Value": email}]
        attributes.extend({"Name": k, "Value": str(v)} for k, v in user_attributes.items())

        kwargs = {
            "ClientId": self.client_id,
            "Username": username,
            "Password": password,
            "UserAttributes": attributes,
        }
        if self.client_secret:
            kwargs["SecretHash"] = self._secret_hash(username)

        try:
            response = self.cognito_client.sign_up(**kwargs)
        except ClientError as e:
            logger.error("Sign up failed for %s: %s", email, e.response["Error"]["Message"])
            raise
        logger.info("User signed up in Cognito: %s", email)
        return {
            "user_sub": response["UserSub"],
            "username": username,
            "user_confirmed": response["UserConfirmed"],
        }

    def confirm_sign_up(self, username: str, confirmation_code: str) -> bool:
        kwargs = {
            "ClientId": self.client_id,
            "Username": username,
            "ConfirmationCode": confirmation_code,
        }
        if self.client_secret:
            kwargs["SecretHash"] = self._secret_hash(username)
        self.cognito_client.confirm_sign_up(**kwargs)
        logger.info("Sign up confirmed for %s", username)
        return True

    def initiate_auth(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate with ADMIN_USER_PASSWORD_AUTH (email alias + client secret).

        Raises:
            ClientError: If authentication fails
        """
        params = {"USERNAME": email, "PASSWORD": password}
        if self.client_secret:
            params["SECRET_HASH"] = self._secret_hash(email)
        try:
            response = self.cognito_client.admin_initiate_auth(
                UserPoolId=self.user_pool_id,
                ClientId=self.client_id,
                AuthFlow="ADMIN_USER_PASSWORD_AUTH",
                AuthParameters=params,
            )
        except ClientError as e:
            logger.error("Authentication failed for %s: %s", email, e.response["Error"]["Message"])
            raise

        result = response["AuthenticationResult"]
        return {
            "id_token": result["IdToken"],
            "access_token": result["AccessToken"],
            "refresh_token": result.get("RefreshToken"),
            "expires_in": result["ExpiresIn"],
        }

    def global_sign_out(self, access_token: str) -> bool:
        """Invalidate all of the user's Cognito tokens."""
        self.cognito_client.global_sign_out(AccessToken=access_token)
        logger.info("User signed out globally")
        return True
