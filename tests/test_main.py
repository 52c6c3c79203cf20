import aiohttp
import pytest

from rustbot.config.model import BotConfig
from rustbot.main import build_client, build_registry, health_check, main
from rustbot.modules.base import Module


@pytest.fixture
def config() -> BotConfig:
    return BotConfig(
        server="irc.example.org",
        port=6667,
        use_tls=False,
        nickname="rustbot",
        channels=["rust"],
        command_prefix="!",
    )


def test_build_client_uses_config(config: BotConfig):
    client = build_client(config)
    assert client.server == "irc.example.org"
    assert client.port == 6667
    assert client.use_tls is False
    assert client.channels == ["#rust"]
    assert client.username == "rustbot"
    assert client.current_nickname() == "rustbot"


@pytest.mark.asyncio
async def test_build_registry_registers_modules(config: BotConfig):
    client = build_client(config)
    async with aiohttp.ClientSession() as session:
        commands = build_registry(config, client, session)
    assert commands.command_prefix == "!"
    assert sorted(commands.named_handlers) == ["crate", "docs", "help"]
    assert len(commands.fallback_handlers) == 1


@pytest.mark.asyncio
async def test_main_exits_without_configuration(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("RUSTBOT_CONF_FILE", str(tmp_path / "missing.conf"))
    for name in ("RUSTBOT_SERVER", "RUSTBOT_NICKNAME", "RUSTBOT_PORT", "RUSTBOT_CHANNELS"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(SystemExit):
        await main()


def test_health_check_reports_configuration(tmp_path, monkeypatch: pytest.MonkeyPatch):
    conf = tmp_path / "rustbot.conf"
    conf.write_text('{"server": "irc.example.org", "nickname": "rustbot"}', encoding="utf-8")
    monkeypatch.setenv("RUSTBOT_CONF_FILE", str(conf))
    assert health_check() == 0


def test_module_requires_init():
    class Incomplete(Module):
        pass

    with pytest.raises(TypeError):
        Incomplete()  # type: ignore[abstract]
