"""
Authentication service.
"""
from sqlalchemy.orm import Session
from botocore.exceptions import ClientError
from app.aws import get_aws_client, CognitoIdentityProviderWrapper
from app.core.config import settings
from app.core.exceptions import EmailAlreadyExists, InvalidCredentials, ValidationError
from app.session import create_session, remove_session
from app.crud import user_crud
from app.model.user import User
from app.schema.auth import UserRegister, UserLogin, LoginResponse, UserInfo
import logging

logger = logging.getLogger(__name__)


def user_info(user: User) -> UserInfo:
    return UserInfo(
        id=str(user.id),
        email=user.email,
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
        city=user.city,
        avatar_url=user.avatar_url,
        is_active=bool(user.is_active),
    )


class AuthService:
    """Cognito sign up / login plus the Redis session that backs every request."""

    def __init__(self, db: Session, cognito: CognitoIdentityProviderWrapper = None):
        self.db = db
        self.cognito = cognito or CognitoIdentityProviderWrapper(
            cognito_client=get_aws_client("cognito-idp", region_name=settings.COGNITO_REGION),
            user_pool_id=settings.COGNITO_USER_POOL_ID,
            client_id=settings.COGNITO_CLIENT_ID,
            client_secret=settings.COGNITO_CLIENT_SECRET,
        )

    def register_user(self, user_data: UserRegister) -> User:
        """Register in Cognito first, then create the local user with the same role."""
        if user_crud.get_by_email(self.db, user_data.email):
            raise EmailAlreadyExists()

        try:
            cognito_response = self.cognito.sign_up(
                email=user_data.email,
                password=user_data.password,
            )
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code == "UsernameExistsException":
                raise EmailAlreadyExists()
            if error_code in ("InvalidPasswordException", "InvalidParameterException"):
                raise ValidationError(e.response["Error"]["Message"])
            raise InvalidCredentials(message=e.response["Error"]["Message"])

        user_dict = user_data.model_dump(exclude={"password"})
        user_dict["cognito_username"] = cognito_response["username"]
        user = user_crud.create_from_dict(self.db, obj_in=user_dict)
        logger.info("User registered: %s (%s)", user.email, user.role)
        return user

    def login(self, login_data: UserLogin) -> LoginResponse:
        """Authenticate via Cognito, create session keyed by the id token."""
        try:
            tokens = self.cognito.initiate_auth(
                email=login_data.email,
                password=login_data.password,
            )
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code in ("NotAuthorizedException", "UserNotFoundException"):
                raise InvalidCredentials()
            raise InvalidCredentials(message=e.response["Error"]["Message"])

        user = user_crud.get_by_email(self.db, login_data.email)
        if not user:
            raise InvalidCredentials(message="User not found in local database")
        if not user.is_active:
            raise InvalidCredentials(message="Account is deactivated")

        id_token = tokens["id_token"]
        create_session(id_token, {
            "user_id": str(user.id),
            "email": user.email,
            "role": user.role,
            "is_active": user.is_active,
            "access_token": tokens["access_token"],  # needed for global sign out
        })
        logger.info("User logged in: %s", user.email)
        return LoginResponse(
            message="Login successful",
            access_token=id_token,
            user=user_info(user),
        )

    def logout(self, token: str, user_data: dict) -> bool:
        """Sign out from Cognito (best effort) and always drop the local session."""
        access_token = user_data.get("access_token")
        if access_token:
            try:
                self.cognito.global_sign_out(access_token)
            except ClientError as e:
                logger.warning("Cognito sign out failed: %s", e.response["Error"]["Message"])
        return remove_session(token)

    def verify_email(self, email: str, code: str) -> None:
        user = user_crud.get_by_email(self.db, email)
        if not user:
            raise InvalidCredentials(message="User not found")
        try:
            self.cognito.confirm_sign_up(user.cognito_username, code)
        except ClientError as e:
            raise InvalidCredentials(message=e.response["Error"]["Message"])
        logger.info("Email verified: %s", email)
