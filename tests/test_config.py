"""Tests for startup configuration and the server entry point."""
import pytest

from energy_wise.config import ConfigurationError, RelayConfig
from energy_wise.prompt.system_prompt import ENERGY_WISE_SYSTEM_PROMPT
from energy_wise.providers.google.google_client import GoogleClient
from energy_wise import standalone


class TestFromEnv:

    def test_defaults(self):
        config = RelayConfig.from_env({"GOOGLE_API_KEY": "test-key"})
        assert config.google_api_key == "test-key"
        assert config.port == 3001
        assert config.host == "0.0.0.0"
        assert config.model == "gemini-2.0-flash"
        assert config.max_output_tokens == 2048
        assert config.temperature == 0.7
        assert config.cors_origins == ["http://localhost:5173"]
        assert config.system_prompt == ENERGY_WISE_SYSTEM_PROMPT

    def test_overrides(self):
        config = RelayConfig.from_env({
            "GOOGLE_API_KEY": "test-key",
            "PORT": "9000",
            "HOST": "127.0.0.1",
            "GEMINI_MODEL": "gemini-2.5-flash",
            "SYSTEM_PROMPT": "Be brief.",
            "CORS_ORIGINS": "http://a.example, http://b.example,",
        })
        assert config.port == 9000
        assert config.host == "127.0.0.1"
        assert config.model == "gemini-2.5-flash"
        assert config.system_prompt == "Be brief."
        assert config.cors_origins == ["http://a.example", "http://b.example"]

    @pytest.mark.parametrize("environ", [{}, {"GOOGLE_API_KEY": ""}, {"GOOGLE_API_KEY": "   "}])
    def test_missing_key(self, environ):
        with pytest.raises(ConfigurationError, match="GOOGLE_API_KEY"):
            RelayConfig.from_env(environ)

    @pytest.mark.parametrize("port", ["abc", "0", "70000", "-1"])
    def test_invalid_port(self, port):
        with pytest.raises(ConfigurationError, match="PORT"):
            RelayConfig.from_env({"GOOGLE_API_KEY": "test-key", "PORT": port})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
        monkeypatch.setenv("PORT", "4000")
        config = RelayConfig.from_env()
        assert config.google_api_key == "from-env"
        assert config.port == 4000

    def test_system_prompt_content(self):
        assert ENERGY_WISE_SYSTEM_PROMPT.startswith("You are an Energy-Wise assistant")
        assert "asterisks" in ENERGY_WISE_SYSTEM_PROMPT


class TestEntryPoint:
    """main() refuses to start without a usable configuration."""

    @pytest.fixture(autouse=True)
    def no_dotenv(self, monkeypatch):
        monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: False)

    def test_exits_without_api_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        with pytest.raises(SystemExit) as exc:
            standalone.main()
        assert exc.value.code == 1

    def test_exits_on_unknown_model(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-unknown")
        with pytest.raises(SystemExit) as exc:
            standalone.main()
        assert exc.value.code == 1

    def test_create_llm_client(self):
        client = standalone.create_llm_client(RelayConfig(google_api_key="test-key"))
        assert isinstance(client, GoogleClient)
        assert client.model == "gemini-2.0-flash"
        assert client.max_tokens == 2048
        assert client.temperature == 0.7
