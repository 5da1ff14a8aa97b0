import json

import pytest

from skyhigh.exceptions import AdvisorUnavailable, AdvisoryError
from skyhigh.services.advisory import (
    AdvisoryService, FallbackAdvisor, Insight, NEUTRAL_INSIGHT, create_advisor,
)
from skyhigh.services.advisory.base import BaseAdvisor
from skyhigh.services.advisory.gemini import GeminiAdvisor, build_prompt
from skyhigh.services.rounds.state import HistoryEntry, RoundState, RoundStatus


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return FakeResponse(self.text)


class FakeClient:
    def __init__(self, text=None, error=None):
        self.models = FakeModels(text=text, error=error)


class RecordingAdvisor(BaseAdvisor):
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    @property
    def name(self):
        return "recording"

    def advise(self, multipliers):
        self.calls.append(list(multipliers))
        if self.error:
            raise self.error
        return Insight("Calm skies.", "Cash out early.", "Low")


def _state(status, count=1):
    history = tuple(
        HistoryEntry(id=f"r{i}", multiplier=1.0 + i, timestamp=float(i)) for i in range(count)
    )
    return RoundState(status=status, history=history)


def test_insight_from_dict_normalises_risk():
    insight = Insight.from_dict({'sentiment': 'Hot', 'recommendation': 'Go', 'riskLevel': 'HIGH'})
    assert insight.risk_level == 'High'
    assert insight.to_dict() == {'sentiment': 'Hot', 'recommendation': 'Go', 'riskLevel': 'High'}


@pytest.mark.parametrize('payload', [
    [],
    {'sentiment': 'x', 'recommendation': 'y'},
    {'sentiment': 'x', 'recommendation': 'y', 'riskLevel': 'Extreme'},
    {'sentiment': '', 'recommendation': 'y', 'riskLevel': 'Low'},
])
def test_insight_from_dict_rejects_bad_payloads(payload):
    with pytest.raises(AdvisoryError):
        Insight.from_dict(payload)


def test_fallback_is_neutral_and_deterministic():
    advisor = FallbackAdvisor()
    assert advisor.advise([2.0, 1.0]) == NEUTRAL_INSIGHT
    assert advisor.advise([]) == NEUTRAL_INSIGHT
    assert NEUTRAL_INSIGHT.risk_level == 'Medium'


def test_create_advisor_selects_provider():
    assert isinstance(create_advisor('fallback'), FallbackAdvisor)
    assert isinstance(create_advisor('something-else'), FallbackAdvisor)
    gemini = create_advisor('gemini', api_key='')
    assert isinstance(gemini, GeminiAdvisor)
    assert not gemini.is_available()


def test_gemini_without_key_is_unavailable():
    advisor = GeminiAdvisor(api_key='')
    with pytest.raises(AdvisorUnavailable):
        advisor.advise([2.0])


def test_gemini_parses_structured_response():
    client = FakeClient(text=json.dumps({
        'sentiment': 'Turbulent skies',
        'recommendation': 'Cash out around 1.5x, pilot.',
        'riskLevel': 'High',
    }))
    advisor = GeminiAdvisor(api_key='k', model='gemini-test', client=client)
    insight = advisor.advise([1.0, 12.5, 2.0])
    assert insight.risk_level == 'High'
    call = client.models.calls[0]
    assert call['model'] == 'gemini-test'
    assert '1.00, 12.50, 2.00' in call['contents']
    assert call['config'].response_mime_type == 'application/json'


def test_gemini_wraps_transport_errors():
    advisor = GeminiAdvisor(api_key='k', client=FakeClient(error=ConnectionError('offline')))
    with pytest.raises(AdvisoryError):
        advisor.advise([2.0])


@pytest.mark.parametrize('text', ['', 'not json', '{"sentiment": "x"}'])
def test_gemini_rejects_unusable_text(text):
    advisor = GeminiAdvisor(api_key='k', client=FakeClient(text=text))
    with pytest.raises(AdvisoryError):
        advisor.advise([2.0])


def test_build_prompt_lists_multipliers():
    prompt = build_prompt([1.0, 3.456])
    assert '[1.00, 3.46]' in prompt
    assert 'financial advice' in prompt


def test_service_fetches_once_per_round_when_idle():
    advisor = RecordingAdvisor()
    service = AdvisoryService(advisor)
    service.on_round_state(_state(RoundStatus.CRASHED))
    service.on_round_state(_state(RoundStatus.STARTING))
    assert advisor.calls == []

    service.on_round_state(_state(RoundStatus.IDLE))
    service.on_round_state(_state(RoundStatus.IDLE))
    assert len(advisor.calls) == 1
    assert service.latest.sentiment == 'Calm skies.'


def test_service_skips_empty_history():
    advisor = RecordingAdvisor()
    service = AdvisoryService(advisor)
    service.on_round_state(_state(RoundStatus.IDLE, count=0))
    assert advisor.calls == []
    assert service.latest is None


def test_service_sends_at_most_window_multipliers():
    advisor = RecordingAdvisor()
    service = AdvisoryService(advisor, window=10)
    service.on_round_state(_state(RoundStatus.IDLE, count=15))
    assert len(advisor.calls[0]) == 10
    assert advisor.calls[0][0] == 1.0


def test_service_substitutes_fallback_on_failure():
    advisor = RecordingAdvisor(error=AdvisoryError('bad json'))
    seen = []
    service = AdvisoryService(advisor)
    service.add_listener(seen.append)
    service.on_round_state(_state(RoundStatus.IDLE))
    assert service.latest == NEUTRAL_INSIGHT
    assert seen == [NEUTRAL_INSIGHT]


def test_service_survives_unexpected_errors():
    service = AdvisoryService(RecordingAdvisor(error=RuntimeError('boom')))
    assert service.refresh([2.0]) == NEUTRAL_INSIGHT


def test_service_uses_spawner():
    spawned = []
    service = AdvisoryService(RecordingAdvisor(), spawn=lambda fn, *args: spawned.append((fn, args)))
    service.on_round_state(_state(RoundStatus.IDLE))
    assert len(spawned) == 1
    assert service.latest is None
    fn, args = spawned[0]
    fn(*args)
    assert service.latest is not None
