"""NiceGUI chat interface for the Ollama relay."""

from nicegui import Client, ui

from ollama_chat.client.assembler import ChatState, DisplayMessage
from ollama_chat.client.session import ChatSession

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: #1f2937; }

    .message-user {
        background: #2563eb;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-assistant pre { margin: 0.5rem 0; }
</style>
"""


async def load_models_when_connected(client: Client, session: ChatSession) -> None:
    """Fill the model dropdown once the browser has connected.

    The page is delivered first, so a slow or hung listing never holds the
    page builder past NiceGUI's response timeout.
    """
    await client.connected()
    await session.load_models()


@ui.page("/")
async def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    messages_container: ui.column
    model_select: ui.select
    status_label: ui.label
    input_field: ui.textarea
    send_btn: ui.button

    def render_message(msg: DisplayMessage) -> None:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}").mark(f"message-{msg.seq}"):
            with ui.element("div").classes(f"max-w-[75%] px-4 py-3 {bubble}"):
                if is_user:
                    ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
                elif msg.content:
                    ui.markdown(msg.content).classes("text-sm")
                else:
                    ui.spinner("dots").classes("text-gray-500")

    def render(state: ChatState) -> None:
        messages_container.clear()
        with messages_container:
            if not state.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Start a conversation").classes("text-lg text-gray-400")
            for msg in state.messages:
                render_message(msg)

        model_select.set_options(list(state.models), value=state.selected_model)
        status_label.set_text(state.error or ("Thinking..." if state.is_busy else ""))
        status_label.classes(
            replace="text-xs " + ("text-red-600" if state.error else "text-gray-500")
        )
        input_field.set_enabled(not state.is_busy)
        send_btn.set_enabled(state.can_send)

    session = ChatSession(on_change=render)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or not session.state.can_send:
            return
        input_field.value = ""
        await session.send(text)

    def on_model_change(event) -> None:
        if event.value != session.state.selected_model:
            session.select_model(event.value)

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("smart_toy").classes("text-white text-3xl")
                ui.label("Ollama Chat").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-3"):
                model_select = (
                    ui.select([], label="Model", on_change=on_model_change)
                    .props("dense dark outlined")
                    .classes("w-56")
                )
                ui.button(icon="add", on_click=session.new_chat).props("flat round color=white")

        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        status_label = ui.label("").classes("text-xs text-gray-500 px-5")

        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.textarea(placeholder="Type a message...")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")

    render(session.state)
    await load_models_when_connected(ui.context.client, session)
