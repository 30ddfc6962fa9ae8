"""
test_send_pipeline.py — Outbound dispatch: routing, ordering and error propagation.
"""

import threading

import pytest

from smsgateway.dispatch import EventKind, Gateway
from smsgateway.errors import (
    ErrorKind,
    NoProvidersError,
    SendMessageError,
    UnknownProviderAliasError,
    credit_error,
)
from smsgateway.providers import Provider


class FailingProvider(Provider):
    """Raises whatever `config['error']` holds."""

    async def send(self, message):
        raise self.config["error"]


class SilentProvider(Provider):
    """Fills in the message and returns nothing."""

    async def send(self, message):
        message.msgid = "s-1"
        message.info = {"silent": True}


class TestDefaultRouting:
    @pytest.mark.asyncio
    async def test_first_registered_is_default(self):
        gw = Gateway()
        gw.add_provider("null", "a", {})
        gw.add_provider("null", "b", {})

        message = await gw.message("+1", "hi").send()

        assert message.provider == "a"

    @pytest.mark.asyncio
    async def test_no_providers(self, gateway):
        with pytest.raises(NoProvidersError):
            await gateway.message("+1", "hi").send()

    @pytest.mark.asyncio
    async def test_explicit_provider(self, loopback_gateway):
        message = await loopback_gateway.message("+1", "hi").provider("lo1").send()

        assert message.provider == "lo1"
        assert loopback_gateway.get_provider("lo0").get_traffic() == []


class TestRouter:
    @pytest.mark.asyncio
    async def test_router_overrides_default(self):
        gw = Gateway()
        gw.add_provider("null", "a", {})
        gw.add_provider("null", "b", {})
        gw.set_router(lambda om, *values: "b" if "urgent" in values else None)

        routed = await gw.message("+1", "hi").route("urgent").send()
        default = await gw.message("+1", "hi").route("casual").send()

        assert routed.provider == "b"
        assert default.provider == "a"

        gw.set_router()
        cleared = await gw.message("+1", "hi").route("urgent").send()
        assert cleared.provider == "a"

    @pytest.mark.asyncio
    async def test_router_receives_message_and_values(self, loopback_gateway):
        def router(om, module, kind):
            if module == "test" and kind == "notify":
                return "lo1"
            return "lo0"

        loopback_gateway.set_router(router)

        lol = await loopback_gateway.message("+999", "hi").route("test", "lol").send()
        notify = await loopback_gateway.message("+999", "hi").route("test", "notify").send()

        assert lol.provider == "lo0"
        assert notify.provider == "lo1"

    @pytest.mark.asyncio
    async def test_router_cannot_mutate_message(self, loopback_gateway):
        def meddling_router(om, *values):
            om.body = "tampered"
            om.to = "+666"
            return "lo1"

        loopback_gateway.set_router(meddling_router)
        message = await loopback_gateway.message("+1", "original").send()

        assert message.body == "original"
        assert message.to == "+1"
        assert message.provider == "lo1"

    @pytest.mark.asyncio
    async def test_router_with_uncopyable_params(self, loopback_gateway):
        lock = threading.Lock()
        seen = []

        def router(om, *values):
            seen.append(om.params["lock"])
            return "lo1"

        loopback_gateway.set_router(router)
        message = await loopback_gateway.message("+1", "hi").params(lock=lock).send()

        assert message.provider == "lo1"
        assert message.params["lock"] is lock
        assert seen == [lock]

    @pytest.mark.asyncio
    async def test_router_params_are_read_only(self, loopback_gateway):
        def meddling_router(om, *values):
            om.params["token"] = "stolen"

        loopback_gateway.set_router(meddling_router)

        with pytest.raises(TypeError):
            await loopback_gateway.message("+1", "hi").params(token="mine").send()

    @pytest.mark.asyncio
    async def test_explicit_provider_skips_router(self, loopback_gateway):
        calls = []
        loopback_gateway.set_router(lambda om, *v: calls.append(om) or "lo1")

        message = await loopback_gateway.message("+1", "hi").provider("lo0").send()

        assert message.provider == "lo0"
        assert calls == []


class TestOrdering:
    @pytest.mark.asyncio
    async def test_unknown_alias_after_msg_out(self, loopback_gateway, event_log):
        log = event_log(loopback_gateway)

        with pytest.raises(UnknownProviderAliasError) as exc_info:
            await loopback_gateway.message("+???", "hello?").provider("?").send()

        assert str(exc_info.value) == "Unknown provider alias: ?"
        assert log == ["msg-out"]

    @pytest.mark.asyncio
    async def test_router_returning_unknown_alias(self, loopback_gateway, event_log):
        log = event_log(loopback_gateway)
        loopback_gateway.set_router(lambda om, *v: "ghost")

        with pytest.raises(UnknownProviderAliasError, match="ghost"):
            await loopback_gateway.message("+1", "hi").send()

        assert log == ["msg-out"]

    @pytest.mark.asyncio
    async def test_success_sequence(self, gateway):
        gateway.add_provider("null", "n", {})
        seen = []
        gateway.on(EventKind.MESSAGE_OUT, lambda m: seen.append(("out", m.provider, m.msgid)))
        gateway.on(EventKind.MESSAGE_SENT, lambda m: seen.append(("sent", m.provider, m.msgid)))

        await gateway.message("+1", "hi").send()

        assert seen == [("out", "n", None), ("sent", "n", 1)]

    @pytest.mark.asyncio
    async def test_same_instance_returned(self, gateway):
        gateway.add_provider("null", "n", {})
        builder = gateway.message("+1", "hi")

        message = await builder.send()

        assert message is builder.message
        assert message.msgid == 1
        assert message.info == {}

    @pytest.mark.asyncio
    async def test_provider_returning_none(self, gateway):
        gateway.add_provider_instance(SilentProvider, "s")

        message = await gateway.message("+1", "hi").send()

        assert message.msgid == "s-1"
        assert message.info == {"silent": True}


class TestSendErrors:
    @pytest.mark.asyncio
    async def test_send_error_propagated_unchanged(self, gateway):
        error = credit_error("balance is zero")
        gateway.add_provider_instance(FailingProvider, "f", {"error": error})
        errors, sent = [], []
        gateway.on(EventKind.ERROR, errors.append)
        gateway.on(EventKind.MESSAGE_SENT, sent.append)

        with pytest.raises(SendMessageError) as exc_info:
            await gateway.message("+1", "hi").send()

        assert exc_info.value is error
        assert errors == [error]
        assert sent == []

    @pytest.mark.asyncio
    async def test_foreign_exception_normalized(self, gateway):
        gateway.add_provider_instance(FailingProvider, "f", {"error": ConnectionError("reset by peer")})
        errors = []
        gateway.on(EventKind.ERROR, errors.append)

        with pytest.raises(SendMessageError) as exc_info:
            await gateway.message("+1", "hi").send()

        err = exc_info.value
        assert err.kind is ErrorKind.GENERIC
        assert isinstance(err.__cause__, ConnectionError)
        assert errors == [err]

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_abort_send(self, gateway):
        gateway.add_provider("null", "n", {})

        def broken(message):
            raise RuntimeError("listener bug")

        gateway.on(EventKind.MESSAGE_OUT, broken)
        gateway.on(EventKind.MESSAGE_SENT, broken)

        message = await gateway.message("+1", "hi").send()

        assert message.msgid == 1


class TestMessageBuilder:
    @pytest.mark.asyncio
    async def test_builder_fields(self, loopback_gateway):
        message = await (
            loopback_gateway.message("+1", "hi")
            .from_("+100")
            .options({"status_report": False}, expires=30)
            .params({"tag": "a"}, priority=2)
            .send()
        )

        assert message.src == "+100"
        assert message.options.expires == 30
        assert message.params == {"tag": "a", "priority": 2}

    def test_unknown_option(self, gateway):
        with pytest.raises(ValueError):
            gateway.message("+1", "hi").options(colour="red")
