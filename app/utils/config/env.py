from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "task-manager"
    environment: str = "local"
    debug: bool = True
    log_level: str = "INFO"

    api_prefix: str = "/api/v1"
    client_url: str = "http://localhost:3000"
    # Extra origins allowed by CORS besides client_url
    extra_cors_origins: list[str] = []

    mongo_url: str | None = None
    mongo_port: int = 27017
    mongo_host: str = "localhost"
    mongo_db: str = "task_manager"
    mongo_password: str | None = None
    mongo_params: str | None = None
    mongo_user: str | None = None

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str = "very-secret-key"
    session_token_expires_minutes: int = 60 * 24
    verification_token_expires_minutes: int = 60
    reset_token_expires_minutes: int = 60
    bcrypt_rounds: int = 12

    session_cookie_name: str = "token"
    session_cookie_secure: bool = True
    session_cookie_samesite: str = "none"

    redis_db: int = 0
    redis_port: int = 6379
    redis_host: str = "localhost"
    redis_password: str | None = None
    redis_url: str | None = None
    email_rate_limit_seconds: int = 60

    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_from: str = "no-reply@task-manager.local"

    seed_admin_email: str = "admin@example.com"
    seed_admin_password: str = "Secret123!"
    seed_creator_email: str = "creator@example.com"
    seed_creator_password: str = "Secret123!"

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=True)

    @property
    def mongo_uri(self) -> str:
        if self.mongo_url:
            return self.mongo_url
        auth = ""
        if self.mongo_user and self.mongo_password:
            auth = f"{self.mongo_user}:{self.mongo_password}@"
        params = f"?{self.mongo_params}" if self.mongo_params else "?retryWrites=true&w=majority"
        return f"mongodb+srv://{auth}{self.mongo_host}/{self.mongo_db}{params}"

    @property
    def cors_origins(self) -> list[str]:
        return [self.client_url.rstrip("/"), *self.extra_cors_origins]

    @property
    def redis_uri(self) -> str:
        if self.redis_url:
            return self.redis_url
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"


settings = Settings()
