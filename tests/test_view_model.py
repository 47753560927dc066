"""Tests for the studio view-model."""

import asyncio
import json

import pytest

from app.core.exceptions import ExportUnavailableError, GenerationError
from app.modules.flashcards.models.flashcards import (
    Flashcard,
    GenerationResult,
    Mode,
    Style,
)
from app.modules.studio.view_model import (
    FAILURE_REPLY,
    Phase,
    Role,
    StudioViewModel,
    TranscriptEntry,
)
from app.modules.user_profile.theme import ProfileTheme
from tests.conftest import FakeAuth, FakeGenerator

CHEM = GenerationResult(
    title="Chem",
    flashcards=(Flashcard(question="pH of water?", answer="7"),),
)


def _vm(generator: FakeGenerator, auth: FakeAuth, clipboard=None) -> StudioViewModel:
    return StudioViewModel(generator, auth, clipboard=clipboard)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_empty_notes_never_call_the_generator(self, auth) -> None:
        generator = FakeGenerator(CHEM)
        vm = _vm(generator, auth)

        phase = await vm.submit("   ")

        assert phase is Phase.ERROR
        assert vm.error == "Please paste your notes first."
        assert generator.calls == []
        assert vm.transcript == ()

    @pytest.mark.asyncio
    async def test_success_replaces_set_and_summarizes(self, auth) -> None:
        generator = FakeGenerator(CHEM)
        vm = _vm(generator, auth)
        vm.set_count(5)
        vm.set_style("exam")
        vm.set_mode(Mode.QUESTIONS)

        phase = await vm.submit("  acids and bases  ")

        assert phase is Phase.READY
        assert vm.title == "Chem"
        assert len(vm.flashcards) == 1
        assert vm.loading is False
        assert vm.error is None
        user, assistant = vm.transcript
        assert user == TranscriptEntry(role=Role.USER, content="acids and bases")
        assert assistant.role is Role.ASSISTANT
        assert "1" in assistant.content and '"Chem"' in assistant.content

        request, token = generator.calls[0]
        assert token == "access-token"
        assert (request.notes, request.count, request.style, request.mode) == (
            "acids and bases",
            5,
            Style.EXAM,
            Mode.QUESTIONS,
        )

    @pytest.mark.asyncio
    async def test_failure_keeps_user_entry(self, auth) -> None:
        vm = _vm(FakeGenerator(error=GenerationError("too long")), auth)

        phase = await vm.submit("very long notes")

        assert phase is Phase.ERROR
        assert vm.error == "too long"
        assert [e.role for e in vm.transcript] == [Role.USER, Role.ASSISTANT]
        assert vm.transcript[1].content == FAILURE_REPLY
        assert vm.loading is False

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_set(self, auth) -> None:
        generator = FakeGenerator(CHEM)
        vm = _vm(generator, auth)
        await vm.submit("first")
        generator.error = GenerationError()

        await vm.submit("second")

        assert vm.title == "Chem"
        assert len(vm.flashcards) == 1
        assert len(vm.transcript) == 4

    @pytest.mark.asyncio
    async def test_missing_session_is_an_auth_error(self) -> None:
        generator = FakeGenerator(CHEM)
        vm = _vm(generator, FakeAuth(None))

        await vm.submit("notes")

        assert vm.error == "Please log in again."
        assert generator.calls == []
        assert vm.transcript[-1].content == FAILURE_REPLY

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, auth) -> None:
        vm = _vm(FakeGenerator(error=RuntimeError("boom")), auth)

        phase = await vm.submit("notes")

        assert phase is Phase.ERROR
        assert vm.error == "Something went wrong"

    @pytest.mark.asyncio
    async def test_only_one_generation_in_flight(self, auth) -> None:
        release = asyncio.Event()

        class SlowGenerator(FakeGenerator):
            async def generate(self, request, auth_token):
                self.calls.append((request, auth_token))
                await release.wait()
                return CHEM

        generator = SlowGenerator()
        vm = _vm(generator, auth)

        first = asyncio.create_task(vm.submit("notes"))
        await asyncio.sleep(0)
        assert vm.phase is Phase.SUBMITTING
        assert vm.can_submit is False

        await vm.submit("again")
        release.set()
        await first

        assert len(generator.calls) == 1
        assert vm.phase is Phase.READY

    @pytest.mark.asyncio
    async def test_result_after_close_is_ignored(self, auth) -> None:
        release = asyncio.Event()

        class SlowGenerator(FakeGenerator):
            async def generate(self, request, auth_token):
                await release.wait()
                return CHEM

        vm = _vm(SlowGenerator(), auth)
        task = asyncio.create_task(vm.submit("notes"))
        await asyncio.sleep(0)

        vm.close()
        release.set()
        await task

        assert vm.flashcards == ()
        assert [e.role for e in vm.transcript] == [Role.USER]


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_restores_initial_state(self, auth) -> None:
        generator = FakeGenerator(CHEM)
        vm = _vm(generator, auth)
        initial = vm.state()

        await vm.submit("one")
        generator.error = GenerationError()
        await vm.submit("two")
        vm.reset()

        assert vm.state() == initial
        vm.reset()
        assert vm.state() == initial

    @pytest.mark.asyncio
    async def test_reset_clears_deck(self, auth) -> None:
        vm = _vm(FakeGenerator(CHEM), auth)
        await vm.submit("notes")

        vm.reset()

        assert len(vm.deck) == 0
        assert vm.card_summary == "Your cards will appear here"


class TestDeckAndObservers:
    @pytest.mark.asyncio
    async def test_new_set_resets_flipped_cards(self, auth) -> None:
        generator = FakeGenerator(CHEM)
        vm = _vm(generator, auth)
        await vm.submit("notes")
        vm.deck.activate(0)

        generator.result = GenerationResult(
            title="Physics", flashcards=(Flashcard(question="F?", answer="ma"),)
        )
        await vm.submit("more notes")

        assert vm.deck[0].showing_answer is False
        assert vm.deck[0].render().text == "F?"

    @pytest.mark.asyncio
    async def test_theme_reaches_cards(self, auth) -> None:
        theme = ProfileTheme(front_image_url="https://img/front.png")
        vm = StudioViewModel(FakeGenerator(CHEM), auth, theme=theme)

        await vm.submit("notes")

        assert vm.deck[0].render().background.image_url == "https://img/front.png"

    @pytest.mark.asyncio
    async def test_listeners_see_each_phase(self, auth) -> None:
        vm = _vm(FakeGenerator(CHEM), auth)
        phases = []
        unsubscribe = vm.subscribe(lambda state: phases.append(state.phase))

        await vm.submit("notes")
        unsubscribe()
        vm.reset()

        assert phases == [Phase.SUBMITTING, Phase.READY]

    @pytest.mark.asyncio
    async def test_card_summary(self, auth) -> None:
        vm = _vm(FakeGenerator(CHEM), auth)
        assert vm.card_summary == "Your cards will appear here"

        await vm.submit("notes")

        assert vm.card_summary == "1 cards • tap to flip"


class TestExport:
    def test_export_without_cards_is_unavailable(self, auth) -> None:
        vm = _vm(FakeGenerator(CHEM), auth)

        assert vm.can_export is False
        with pytest.raises(ExportUnavailableError):
            vm.export_csv()

    @pytest.mark.asyncio
    async def test_download_json(self, auth, tmp_path) -> None:
        vm = _vm(FakeGenerator(CHEM), auth)
        await vm.submit("notes")

        path = vm.download("json", tmp_path)

        assert path.name == "chem.json"
        doc = json.loads(path.read_text(encoding="utf-8"))
        assert doc == {
            "title": "Chem",
            "flashcards": [{"question": "pH of water?", "answer": "7"}],
        }

    @pytest.mark.asyncio
    async def test_export_csv(self, auth) -> None:
        vm = _vm(FakeGenerator(CHEM), auth)
        await vm.submit("notes")

        export = vm.export_csv()

        assert export.filename == "chem.csv"
        assert export.content == '"Question","Answer"\n"pH of water?","7"'

    @pytest.mark.asyncio
    async def test_unknown_format(self, auth, tmp_path) -> None:
        vm = _vm(FakeGenerator(CHEM), auth)
        await vm.submit("notes")

        with pytest.raises(ValueError):
            vm.download("xlsx", tmp_path)
