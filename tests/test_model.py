"""
test_model.py — Message records, status transitions and the error taxonomy.
"""

import pytest

from smsgateway.data import IncomingMessage, MessageStatus, OutgoingMessage, SendingOptions, StatusCode
from smsgateway import errors
from smsgateway.errors import ErrorKind, SendMessageError


class TestOutgoingMessage:
    def test_defaults(self):
        om = OutgoingMessage(to="+123", body="hey")

        assert om.src is None
        assert om.provider is None
        assert om.msgid is None
        assert om.info is None
        assert om.routing_values is None
        assert om.params == {}
        assert om.options == SendingOptions()
        assert om.created.tzinfo is not None

    def test_options_defaults(self):
        opts = SendingOptions()

        assert opts.allow_reply is False
        assert opts.status_report is False
        assert opts.escalate is False
        assert opts.expires is None
        assert opts.sender_id is None

    def test_options_merged_returns_new_instance(self):
        opts = SendingOptions()
        merged = opts.merged({"status_report": True, "expires": 60})

        assert merged.status_report is True
        assert merged.expires == 60
        assert opts.status_report is False

    def test_options_reject_unknown_keys(self):
        with pytest.raises(ValueError, match="bogus"):
            SendingOptions().merged({"bogus": 1})

    def test_options_are_frozen(self):
        with pytest.raises(Exception):
            SendingOptions().status_report = True


class TestIncomingMessage:
    def test_immutable(self):
        im = IncomingMessage(provider="lo0", src="+1", to="", body="hi", msgid=1)

        with pytest.raises(Exception):
            im.body = "changed"
        assert im.info == {}


class TestMessageStatus:
    def test_initial_state(self):
        status = MessageStatus(provider="lo0", msgid=1)

        assert status.status is StatusCode.UNK
        assert status.delivered is False
        assert status.error is None

    def test_err_sets_error(self):
        status = MessageStatus(provider="lo0", msgid=1).set_status("ERR", "no route")

        assert status.delivered is False
        assert status.error == "no route"
        assert status.status is StatusCode.ERR

    @pytest.mark.parametrize("code", ["OK", "SENT"])
    def test_delivered_codes_clear_error(self, code):
        status = MessageStatus(provider="lo0", msgid=1)
        status.set_status("ERR", "boom")
        status.set_status(code, "fine")

        assert status.delivered is True
        assert status.error is None
        assert status.status_text == "fine"

    @pytest.mark.parametrize("code", ["SENDING", "EXPIRED", "UNK"])
    def test_other_codes_neither_deliver_nor_error(self, code):
        status = MessageStatus(provider="lo0", msgid=1)
        status.set_status("OK")
        status.set_status(code, "text")

        assert status.delivered is False
        assert status.error is None

    def test_no_history_dependence(self):
        sequences = [
            ["OK", "ERR", "SENT"],
            ["ERR", "ERR", "SENT"],
            ["EXPIRED", "SENDING", "SENT"],
        ]
        for seq in sequences:
            status = MessageStatus(provider="lo0", msgid=1)
            for code in seq:
                status.set_status(code, "t")
            assert (status.delivered, status.error) == (True, None)

        status = MessageStatus(provider="lo0", msgid=1)
        for code in ["OK", "SENT", "ERR"]:
            status.set_status(code, "last")
        assert (status.delivered, status.error) == (False, "last")

    def test_accepts_enum_and_rejects_unknown(self):
        status = MessageStatus(provider="lo0", msgid=1).set_status(StatusCode.SENT)
        assert status.delivered is True

        with pytest.raises(ValueError):
            status.set_status("DELIVERED")


class TestErrorTaxonomy:
    def test_codes(self):
        assert errors.generic_error().code == 1
        assert errors.auth_error().code == 2
        assert errors.limits_error().code == 3
        assert errors.credit_error().code == 4
        assert errors.unsupported_error().code == 5
        assert errors.request_error().code == 40
        assert errors.invalid_source_error().code == 41
        assert errors.invalid_destination_error().code == 42
        assert errors.invalid_parameter_error().code == 43
        assert errors.server_error().code == 50

    def test_codes_are_unique(self):
        table = errors.check_error_codes()
        assert len(table) == len(ErrorKind)

    def test_families(self):
        assert errors.credit_error().is_provider_error
        assert errors.invalid_destination_error().is_request_error
        assert errors.server_error().is_server_error
        assert not errors.server_error().is_request_error

    def test_default_and_custom_message(self):
        assert str(errors.auth_error()) == "Provider Authentication Error"
        assert str(errors.auth_error("bad token")) == "bad token"

    def test_from_code(self):
        assert ErrorKind.from_code(42) is ErrorKind.INVALID_DESTINATION
        with pytest.raises(ValueError):
            ErrorKind.from_code(99)

    def test_from_exception(self):
        original = errors.limits_error()
        assert SendMessageError.from_exception(original) is original

        wrapped = SendMessageError.from_exception(RuntimeError("socket closed"))
        assert wrapped.kind is ErrorKind.GENERIC
        assert "socket closed" in wrapped.message

    def test_gateway_faults_are_not_send_errors(self):
        err = errors.UnknownProviderAliasError("?")

        assert str(err) == "Unknown provider alias: ?"
        assert isinstance(err, LookupError)
        assert not isinstance(err, SendMessageError)
        assert isinstance(errors.DuplicateAliasError("a"), ValueError)
