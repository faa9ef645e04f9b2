"""Reply code expected from the server at each dialog stage."""

from __future__ import annotations

from socket_mailer.delivery_failures import DeliveryStage

EXPECTED_REPLY_CODES: dict[DeliveryStage, str] = {
    DeliveryStage.GREETING: "220",
    DeliveryStage.HELLO: "250",
    DeliveryStage.AUTH_REQUEST: "334",
    DeliveryStage.AUTH_USERNAME: "334",
    DeliveryStage.AUTH_PASSWORD: "235",
    DeliveryStage.MAIL_FROM: "250",
    DeliveryStage.RCPT_TO: "250",
    DeliveryStage.DATA: "354",
    DeliveryStage.MESSAGE_BODY: "250",
}


def expected_code(stage: DeliveryStage) -> str:
    try:
        return EXPECTED_REPLY_CODES[stage]
    except KeyError as exc:
        raise ValueError(f"Stage '{stage.value}' is not gated by a reply code.") from exc
