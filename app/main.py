import sys
import uuid

from app.config.settings import Settings
from app.conversation.service import build_conversation_service
from app.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> build dependencies -> run console conversation."""
    settings = Settings()
    Log.configure(settings.log_level)

    service = build_conversation_service(settings)
    session_id = str(uuid.uuid4())
    Log.info("Conversation started", session_id=session_id)

    try:
        for line in sys.stdin:
            text = line.strip()
            if not text:
                continue
            turn = service.handle_turn(session_id, text)
            print(turn.reply_text, flush=True)
    except KeyboardInterrupt:
        Log.info("Conversation interrupted")
    finally:
        service.end_session(session_id)


if __name__ == "__main__":
    main()
