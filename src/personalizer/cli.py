"""CLI interface for Personalizer."""

import json
import os
import uuid
from typing import Callable, Sequence

from groq import AsyncGroq
from openai import AsyncOpenAI

from .agent import Assistant, AssistantReply
from .config import AssistantConfig
from .llm import Completer, Embedder, GroqCompleter, OpenAIEmbedder
from .logging import configure_logger, get_logger
from .memory import (
    ConversationTurn,
    ConversationWindow,
    ExtractionPipeline,
    FactExtractor,
    MemoryManager,
    MemoryRecord,
    MemoryStore,
    Retriever,
)

BANNER = """
🧠 Personal Assistant with Structured Memory
---------------------------------------------

Commands:
  categories        - Show memory categories
  list [category]   - List stored memories
  delete <id>       - Delete one memory
  delete all        - Delete all memories
  history           - Show recent conversation
  clear             - Clear conversation history
  help              - Show this help
  exit, quit        - Exit the CLI

Anything else is sent to the assistant.
"""

PROMPT = "[Categories/List/Delete/History/Clear/Exit] or just ask a question > "


def format_memories(records: Sequence[MemoryRecord], category: str | None = None) -> str:
    """Format stored memories for display."""
    if not records:
        return "(no memories stored)"

    header = "🧾 Memory Items"
    if category:
        header += f" (category: {category})"
    lines = [f"\n{header}:"]
    for record in records:
        category_info = f" [{record.category}]" if record.category else ""
        lines.append(
            f"- [{record.id}] {record.key}: {record.value}{category_info} ({record.created_at})"
        )
    return "\n".join(lines) + "\n"


def format_categories(summary: dict[str, int]) -> str:
    """Format a category summary for display."""
    if not summary:
        return "(no categories found)"

    lines = ["🏷️ Categories in memory:"]
    lines.extend(f"- {category} ({count})" for category, count in summary.items())
    return "\n".join(lines) + "\n"


def format_history(turns: Sequence[ConversationTurn]) -> str:
    """Format the conversation window for display."""
    if not turns:
        return "(no chat history stored)"

    lines = ["\n📜 Recent Chat History:"]
    for i, turn in enumerate(turns, start=1):
        lines.append(f"- [{i}] User: {turn.user}")
        lines.append(f"         Assistant: {turn.assistant}")
    return "\n".join(lines) + "\n"


def ask_to_confirm(key: str, value: str) -> bool:
    """Ask the user whether to store an extracted fact."""
    answer = input(f"💾 Save memory [{key}: {value}]? (y/n) ")
    return answer.strip().lower().startswith("y")


class CLI:
    """Interactive command-line interface for Personalizer."""

    def __init__(
        self,
        config: AssistantConfig | None = None,
        embedder: Embedder | None = None,
        completer: Completer | None = None,
        confirm: Callable[[str, str], bool] = ask_to_confirm,
    ) -> None:
        self.config = config or AssistantConfig.from_env()

        if embedder is None:
            embedder = OpenAIEmbedder(
                AsyncOpenAI(api_key=os.getenv("OPENAI_API_KEY")),
                model=self.config.embedding_model,
            )
        if completer is None:
            completer = GroqCompleter(
                AsyncGroq(api_key=os.getenv("GROQ_API_KEY")),
                model=self.config.chat_model,
            )

        # Setup memory system
        self.memory_store = MemoryStore(
            self.config.memory_path, dedup_threshold=self.config.dedup_threshold
        )
        self.window = ConversationWindow(
            self.config.history_path, limit=self.config.history_limit
        )
        self.memory_manager = MemoryManager(
            self.memory_store,
            embedder,
            key_weight=self.config.key_weight,
            value_weight=self.config.value_weight,
        )
        pipeline = ExtractionPipeline(
            FactExtractor(completer),
            self.memory_manager,
            confirm=confirm,
            ask_confirmation=self.config.ask_memory_confirm,
        )

        self.logger = get_logger()
        self.assistant = Assistant(
            Retriever(self.memory_store, embedder, top_n=self.config.top_n),
            self.window,
            completer,
            pipeline=pipeline,
            event_log=self.logger,
        )
        self.session_id = self._new_session_id()

    def _new_session_id(self) -> str:
        """Generate a new session ID."""
        return f"cli-{uuid.uuid4().hex[:8]}"

    def load(self) -> None:
        """Load memory and chat history from disk."""
        count = self.memory_store.load()
        if count:
            print(f"🔄 Loaded {count} memory items.")
        turns = self.window.load()
        if turns:
            print(f"🗂️ Loaded {turns} chat history turns.")

    def _format_reply(self, result: AssistantReply) -> str:
        """Format the assistant's reply and what it remembered."""
        if not result.reply:
            return "\n⚠️ No reply from the assistant.\n"

        output = [f"\n🤖 {result.reply}\n"]
        if result.extraction is not None:
            for outcome in result.extraction.stored:
                record = outcome.record
                assert record is not None
                category_info = f" ({record.category})" if record.category else ""
                output.append(f"🧠 Remembered: [{record.key}] {record.value}{category_info}")
            for outcome in result.extraction.skipped:
                existing = outcome.duplicate_of
                assert existing is not None
                output.append(f"⚠️ Skipped duplicate memory: [{existing.key}] {existing.value}")
        return "\n".join(output)

    async def _process_message(self, message: str) -> None:
        """Send a query through the assistant."""
        try:
            result = await self.assistant.respond(message)
            print(self._format_reply(result))
        except Exception as e:
            error_msg = f"Error: {e}"
            print(f"\n❌ {error_msg}")
            self.logger.log("error", error=str(e), context="query")

    def _delete(self, target: str) -> None:
        """Handle ``delete <id>``."""
        try:
            record_id = int(target)
        except ValueError:
            print(f"⚠️ No memory found with ID {target}")
            return

        removed = self.memory_store.delete_by_id(record_id)
        if removed is None:
            print(f"⚠️ No memory found with ID {target}")
            return

        self.logger.log_memory_delete(removed.id, removed.key)
        print(f'❌ Deleted memory: "{removed.text}"')

    async def _handle_command(self, command: str) -> bool:
        """Handle one line of input. Returns True to continue, False to exit."""
        text = command.strip()
        cmd = text.lower()

        try:
            if cmd in ("exit", "quit", "/exit", "/quit"):
                print("\n👋 Goodbye!")
                self.logger.log("session_end")
                return False

            if cmd in ("help", "/help"):
                print(BANNER)
            elif cmd == "categories":
                print(format_categories(self.memory_store.category_summary()))
            elif cmd == "list":
                print(format_memories(self.memory_store.get_all()))
            elif cmd.startswith("list "):
                category = text[5:].strip()
                print(format_memories(self.memory_store.get_by_category(category), category))
            elif cmd == "history":
                print(format_history(self.window.get_turns()))
            elif cmd == "clear":
                self.window.clear()
                self.logger.log("history_clear")
                print("🧹 Cleared chat history.")
            elif cmd.startswith("delete all"):
                count = self.memory_store.clear()
                self.logger.log("memory_clear", removed=count)
                print("🧹 Cleared memory.")
            elif cmd.startswith("delete "):
                self._delete(text[7:].strip())
            else:
                await self._process_message(text)
        except OSError as e:
            print(f"\n❌ Error: {e}")
            self.logger.log("error", error=str(e), context=cmd.split(" ")[0])

        return True

    async def run(self) -> None:
        """Run the interactive CLI."""
        print(BANNER)
        self.logger.set_session_id(self.session_id)
        try:
            self.load()
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError) as e:
            # Leave the files alone so a later save cannot overwrite them.
            print(f"\n❌ Error: could not load saved data: {e}")
            self.logger.log("error", error=str(e), context="load")
            return
        self.logger.log("session_start")

        while True:
            try:
                user_input = input(PROMPT).strip()

                if not user_input:
                    continue

                if not await self._handle_command(user_input):
                    break

            except KeyboardInterrupt:
                print("\n\n⚡ Interrupted")
                try:
                    confirm = input("Exit? (y/n): ").strip().lower()
                    if confirm in ("y", "yes"):
                        print("👋 Goodbye!")
                        self.logger.log("session_interrupt")
                        break
                except (KeyboardInterrupt, EOFError):
                    print("\n👋 Goodbye!")
                    break

            except EOFError:
                print("\n👋 Goodbye!")
                break


async def run_cli() -> None:
    """Run the CLI with configuration from the environment."""
    config = AssistantConfig.from_env()
    configure_logger(config.log_dir)

    # Check for API keys
    missing = [name for name in ("GROQ_API_KEY", "OPENAI_API_KEY") if not os.getenv(name)]
    if missing:
        print(f"❌ Error: {', '.join(missing)} environment variable not set")
        print("Please set it in your .env file or environment")
        return

    cli = CLI(config=config)
    await cli.run()
