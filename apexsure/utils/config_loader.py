"""
Configuration loader for the policy portal
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from apexsure.integrations.clients.real_http.policy_submission import DEFAULT_TIMEOUT_SECONDS, PolicySubmissionClient
from apexsure.integrations.contracts.interfaces import IntegrationEndpoint, IntegrationModeKind, IntegrationModes
from apexsure.portal.progress import DEFAULT_STEP_DELAYS, DEFAULT_STEP_LABELS, STEP_COUNT, ProgressSimulator
from apexsure.portal.traffic import DEFAULT_MASK_PREFIX_LENGTH, TrafficRecorder
from apexsure.portal.workflow import DEFAULT_SETTLE_DELAY, PortalWorkflow

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "portal_config.yml"
DEFAULT_API_MANAGER_URL = "https://localhost:8300/policy/1.0.0/policy"
DEFAULT_INTEGRATOR_URL = "http://localhost:9090/policy"


class EndpointConfig(BaseModel):
    """One policy endpoint"""

    url: str
    token: Optional[SecretStr] = None


class ProgressConfig(BaseModel):
    """Progress simulation pacing"""

    step_labels: List[str] = Field(default_factory=lambda: list(DEFAULT_STEP_LABELS))
    step_delays: List[float] = Field(default_factory=lambda: list(DEFAULT_STEP_DELAYS))
    settle_delay: float = Field(ge=0.0, default=DEFAULT_SETTLE_DELAY)

    @field_validator("step_labels", "step_delays")
    @classmethod
    def _four_steps(cls, value: list) -> list:
        if len(value) != STEP_COUNT:
            raise ValueError(f"exactly {STEP_COUNT} entries are required")
        return value


class TrafficConfig(BaseModel):
    """Under-the-hood traffic log"""

    mask_prefix_length: int = Field(ge=0, default=DEFAULT_MASK_PREFIX_LENGTH)


class PortalConfig(BaseModel):
    """Complete portal configuration"""

    api_mode: IntegrationModeKind = IntegrationModeKind.DIRECT_INTEGRATOR
    api_manager: EndpointConfig = Field(default_factory=lambda: EndpointConfig(url=DEFAULT_API_MANAGER_URL))
    integrator: EndpointConfig = Field(default_factory=lambda: EndpointConfig(url=DEFAULT_INTEGRATOR_URL))
    request_timeout_seconds: float = Field(gt=0.0, default=DEFAULT_TIMEOUT_SECONDS)
    progress: ProgressConfig = Field(default_factory=ProgressConfig)
    traffic: TrafficConfig = Field(default_factory=TrafficConfig)

    @field_validator("api_mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        return parse_mode(value) if isinstance(value, str) else value

    def integration_modes(self) -> IntegrationModes:
        return IntegrationModes(
            direct=IntegrationEndpoint(kind=IntegrationModeKind.DIRECT_INTEGRATOR, base_url=self.integrator.url),
            gateway=IntegrationEndpoint(
                kind=IntegrationModeKind.GATEWAY_FRONTED,
                base_url=self.api_manager.url,
                token=self.api_manager.token,
            ),
        )


def parse_mode(value: str) -> IntegrationModeKind:
    """Accept ``INTEGRATOR`` / ``API_MANAGER`` as well as the enum member names."""
    key = value.strip().upper()
    for kind in IntegrationModeKind:
        if key in (kind.value, kind.name):
            return kind
    raise ValueError(f"Unknown API mode '{value}'. Expected INTEGRATOR or API_MANAGER")


def load_portal_config(config_path: Optional[Path] = None) -> PortalConfig:
    """
    Load and validate portal configuration from YAML file, then apply
    environment overrides (API_MODE, API_MANAGER_URL, API_MANAGER_TOKEN,
    INTEGRATOR_URL, PORTAL_REQUEST_TIMEOUT).

    Args:
        config_path: Path to config file. Defaults to config/portal_config.yml;
            the default file is optional, an explicit path is not.

    Returns:
        Validated PortalConfig object

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    config_data: dict = {}
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.info(f"No config file at {path}, using defaults")

    _apply_env_overrides(config_data)

    try:
        config = PortalConfig(**config_data)
        logger.info(f"Loaded portal config (mode={config.api_mode.name})")
        return config
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise


def _apply_env_overrides(config_data: dict) -> None:
    if os.getenv("API_MODE"):
        config_data["api_mode"] = os.environ["API_MODE"]

    api_manager = dict(config_data.get("api_manager") or {})
    if os.getenv("API_MANAGER_URL"):
        api_manager["url"] = os.environ["API_MANAGER_URL"]
    if os.getenv("API_MANAGER_TOKEN"):
        api_manager["token"] = os.environ["API_MANAGER_TOKEN"]
    if api_manager:
        api_manager.setdefault("url", DEFAULT_API_MANAGER_URL)
        config_data["api_manager"] = api_manager

    if os.getenv("INTEGRATOR_URL"):
        integrator = dict(config_data.get("integrator") or {})
        integrator["url"] = os.environ["INTEGRATOR_URL"]
        config_data["integrator"] = integrator

    if os.getenv("PORTAL_REQUEST_TIMEOUT"):
        config_data["request_timeout_seconds"] = os.environ["PORTAL_REQUEST_TIMEOUT"]


def build_workflow(config: PortalConfig, transport=None, **kwargs) -> PortalWorkflow:
    """Wire a PortalWorkflow from config. Extra kwargs go to PortalWorkflow."""
    recorder = TrafficRecorder(mask_prefix_length=config.traffic.mask_prefix_length)
    client = PolicySubmissionClient(
        recorder=recorder,
        timeout_seconds=config.request_timeout_seconds,
        transport=transport,
    )
    progress = ProgressSimulator(labels=config.progress.step_labels, delays=config.progress.step_delays)
    return PortalWorkflow(
        modes=config.integration_modes(),
        mode=config.api_mode,
        client=client,
        progress=progress,
        settle_delay=config.progress.settle_delay,
        **kwargs,
    )
