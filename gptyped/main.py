"""
Demo usage: run with python -m gptyped.main
Runs offline: a scripted transport stands in for the model.
"""
from __future__ import annotations

from pydantic import BaseModel

from gptyped.errors import PrompterError
from gptyped.prompter import PrompterBuilder


class Contact(BaseModel):
    name: str
    email: str | None = None
    phone: str | None = None


DESCRIPTOR = {"name": "string", "email": "string or null", "phone": "string or null"}

DEMO_REPLIES = [
    ("Bare JSON", '{"name": "Ankit", "email": "ankit@gmail.com", "phone": "9876543210"}'),
    ("Fenced reply", 'Sure! Here it is:\n```json\n{"name": "Rohit", "phone": "9876543210"}\n```'),
    ("Smart quotes", "{“name”: “Raj”, “email”: “raj@abc.com”}"),
    ("Prose reply", "I could not find any contact details in that text."),
    ("Missing field", '{"email": "someone@example.com"}'),
]


class ScriptedTransport:
    """Replays canned replies in order."""

    def __init__(self, replies: list[str]) -> None:
        self._replies = list(replies)

    async def send_text(self, prompt: str) -> str:
        return self._replies.pop(0)


def main() -> None:
    transport = ScriptedTransport([reply for _, reply in DEMO_REPLIES])
    prompter = (
        PrompterBuilder(transport, Contact, DESCRIPTOR)
        .with_metaprompt("Extract the contact details from the input text.")
        .build()
    )

    print("--- gptyped demo ---\n")
    for label, reply in DEMO_REPLIES:
        print(f"[{label}] reply: {reply[:60]!r}...")
        try:
            contact = prompter.send_sync({"text": "demo"})
            print(f"  -> Ok({contact.model_dump()})")
        except PrompterError as e:
            print(f"  -> Err(failure_type={e.failure_type.value!r})")
        print()
    print("--- done ---")


if __name__ == "__main__":
    main()
