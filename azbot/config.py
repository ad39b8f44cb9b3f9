from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./azbot.db"
    debug: bool = False
    log_level: str = "INFO"

    luis_endpoint: str = "https://api.projectoxford.ai/luis/v1/application"
    luis_app_id: str = ""
    luis_subscription_key: str = ""
    classifier_timeout_seconds: float = 5.0

    remote_backend: str = "rest_proxy"  # rest_proxy, management_api
    rest_proxy_base_url: str = "https://smarm.azurewebsites.net/api/arm"
    rest_proxy_username: str = ""
    rest_proxy_password: str = ""
    authority_url: str = "https://login.microsoftonline.com"
    management_url: str = "https://management.azure.com"
    subscriptions_api_version: str = "2016-06-01"
    resource_groups_api_version: str = "2016-09-01"
    remote_timeout_seconds: float = 15.0

    state_scope: str = "conversation"  # conversation, user
    state_write_retries: int = 3

    connector_token: str = ""
    connector_timeout_seconds: float = 10.0

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def get_settings() -> Settings:
    return settings
