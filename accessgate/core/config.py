"""
Application configuration.
All settings are loaded from environment variables.
Use env.example as a reference for the available variables.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


DEFAULT_IPFS_GATEWAYS = ",".join([
    "https://{cid}.ipfs.dweb.link",
    "https://{cid}.ipfs.nftstorage.link",
    "https://{cid}.ipfs.infura-ipfs.io",
    "https://gateway.pinata.cloud/ipfs/{cid}",
    "https://ipfs.io/ipfs/{cid}",
])


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Contract addresses default to the Base mainnet deployment.
    """

    # ===========================================
    # APPLICATION
    # ===========================================
    app_env: str = "local"
    # CORS: comma-separated origins. Empty = default list in code.
    cors_origins: str = ""
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    uvicorn_workers: int = 2

    # ===========================================
    # CHAIN (JSON-RPC)
    # ===========================================
    rpc_url: str = "https://mainnet.base.org"
    rpc_timeout: float = 10.0
    chain_id: int = 8453
    # Stablecoin used for payments (USDC on Base, 6 decimals)
    token_contract_address: str = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"
    token_decimals: int = 6
    # Settlement contract: getContent / checkAccess
    settlement_contract_address: str = "0xe7880e2add0429296dffc12cb8c14726fbe5de29"

    # ===========================================
    # STORAGE (durable key-value)
    # ===========================================
    store_backend: str = "redis"  # redis, memory
    redis_url: str = "redis://localhost:6379/0"
    store_key_prefix: str = ""

    # ===========================================
    # SUBSCRIPTIONS
    # ===========================================
    subscription_period_days: int = 30

    # ===========================================
    # CONTENT METADATA (IPFS gateways)
    # ===========================================
    # Comma-separated URL templates with a {cid} placeholder, tried in order.
    ipfs_gateways: str = DEFAULT_IPFS_GATEWAYS
    ipfs_gateway_timeout: float = 10.0

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: str = "INFO"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("token_contract_address", "settlement_contract_address")
    @classmethod
    def normalize_address(cls, v: str) -> str:
        """Store contract addresses lowercased; comparisons are case-insensitive."""
        return v.strip().lower()

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("redis", "memory"):
            raise ValueError("store_backend must be 'redis' or 'memory'")
        return v

    @field_validator("ipfs_gateways")
    @classmethod
    def validate_gateways(cls, v: str) -> str:
        for template in v.split(","):
            if template.strip() and "{cid}" not in template:
                raise ValueError(f"gateway template without {{cid}}: {template.strip()}")
        return v

    @property
    def ipfs_gateway_list(self) -> list[str]:
        """Gateway templates in configured order."""
        return [g.strip() for g in self.ipfs_gateways.split(",") if g.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
