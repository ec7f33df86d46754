from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # Backend API
    public_api_key: str = Field(
        default="",
        description="Public API key used for the backend, bundler and paymaster",
        validation_alias=AliasChoices("public_api_key", "PUBLIC_API_KEY", "FUSE_PUBLIC_API_KEY"),
    )
    base_url: str = Field(default="api.fuse.io", description="Backend host (no scheme)")
    request_timeout_seconds: int = Field(default=30, description="Request timeout")

    # Chain
    chain_rpc_url: str = Field(default="https://rpc.fuse.io", description="JSON-RPC endpoint of the chain")
    native_token_address: str = Field(
        default="0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",
        description="Sentinel address used for the native asset",
    )
    native_token_symbol: str = Field(default="FUSE", description="Native asset symbol")
    native_token_name: str = Field(default="Fuse Token", description="Native asset name")

    # ERC-4337
    entry_point_address: str = Field(
        default="0x5FF137D4b0FDCD49DcA30c7CF57E578a026d2789",
        description="EntryPoint contract address",
    )
    factory_address: str = Field(
        default="0x7f6d8F107fE8551160BD5351d5F1514A6aD5d40E",
        description="Smart wallet factory address",
        validation_alias=AliasChoices("factory_address", "ETHERSPOT_FACTORY"),
    )
    paymaster_rpc_method: str = Field(
        default="pm_sponsorUserOperation",
        description="JSON-RPC method used to request paymaster sponsorship",
    )
    override_bundler_rpc: str = Field(
        default="",
        description="Send bundler methods to this URL instead of the backend bundler",
    )

    # Receipts
    receipt_poll_interval_seconds: float = Field(default=2.0, gt=0, description="Receipt poll interval")
    receipt_timeout_seconds: float = Field(default=120.0, gt=0, description="Give up waiting for a receipt after this")

    def bundler_url(self, public_api_key: str = "", base_url: str = "") -> str:
        key = public_api_key or self.public_api_key
        return f"https://{base_url or self.base_url}/api/v0/bundler?apiKey={key}"

    def paymaster_url(self, public_api_key: str = "", base_url: str = "") -> str:
        key = public_api_key or self.public_api_key
        return f"https://{base_url or self.base_url}/api/v0/paymaster?apiKey={key}"

    def api_base_url(self, base_url: str = "") -> str:
        return f"https://{base_url or self.base_url}/api"


# Global settings instance
settings = Settings()
