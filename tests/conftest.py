"""测试配置和共享 Fixtures。"""

import asyncio
import threading
from datetime import date

import pytest

from src.models import Gender, Preference, Profile, ScoreResult, ScoreSource
from src.services.llm_service import BaseLLMService
from src.services.profile_store import InMemoryProfileStore
from src.services.suggestion_store import InMemorySuggestionStore


# ============================================================================
# Mock Services
# ============================================================================

class MockLLMService(BaseLLMService):
    """测试用 Mock LLM 服务。

    可以通过设置 response 属性来控制返回值。
    可以通过设置 should_fail 来模拟失败。
    可以通过设置 responder (prompt -> str) 按 prompt 返回不同内容。
    可以通过设置 delay 模拟慢响应（秒）。
    """

    def __init__(self):
        self.response = "75\nGood Compatibility: Solid overlap on values and lifestyle."
        self.responder = None
        self.should_fail = False
        self.fail_count = 0
        self.max_failures = 0
        self.call_count = 0
        self.delay = 0.0
        self.prompts = []

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        self.call_count += 1
        self.prompts.append(prompt)

        if self.should_fail:
            if self.fail_count < self.max_failures:
                self.fail_count += 1
                raise Exception("Mock LLM failure")

        if self.responder is not None:
            return self.responder(prompt)
        return self.response

    async def call_async(self, prompt: str, *, json_mode: bool = False) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.call(prompt, json_mode=json_mode)

    def reset(self):
        """重置状态。"""
        self.call_count = 0
        self.fail_count = 0
        self.prompts = []


class BlockingLLMService(BaseLLMService):
    """阻塞式 LLM：call 在 worker 线程中挂起，直到 release 被设置或超过 hang_seconds。

    不覆盖 call_async，因此走真实的线程池路径。
    """

    def __init__(self, hang_seconds: float = 5.0):
        self.hang_seconds = hang_seconds
        self.release = threading.Event()
        self.call_count = 0

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        self.call_count += 1
        self.release.wait(self.hang_seconds)
        return "90\nHigh Potential Match: late reply"


class StubScoringService:
    """按 candidate id 返回固定分数的评分服务，可为每个 candidate 设置延迟。"""

    def __init__(self, scores, delays=None, source=ScoreSource.EXTERNAL):
        self.scores = scores
        self.delays = delays or {}
        self.source = source
        self.scored = []

    async def score_async(self, customer, candidate):
        await asyncio.sleep(self.delays.get(candidate.id, 0))
        self.scored.append(candidate.id)
        return ScoreResult(
            score=self.scores[candidate.id],
            explanation=f"stub explanation for {candidate.id}",
            source=self.source,
        )


class FailingSuggestionStore(InMemorySuggestionStore):
    """写入时总是失败的 Suggestion Store。"""

    def insert_many(self, suggestions):
        from src.services.profile_store import StoreError
        raise StoreError("disk full")


# ============================================================================
# Profile Fixtures
# ============================================================================

def make_profile(profile_id: str, gender: Gender, **overrides) -> Profile:
    """创建 Profile，未指定字段使用合理默认值。"""
    defaults = dict(
        id=profile_id,
        first_name=profile_id.title(),
        last_name="Test",
        gender=gender,
        date_of_birth=date(1995, 6, 15),
        income=700_000,
        height=170,
        city="Pune",
        country="India",
        marital_status="Single",
        religion="Hindu",
        caste="General",
        languages=("English", "Hindi"),
        wants_kids=Preference.YES,
        open_to_relocate=Preference.YES,
        open_to_pets=Preference.MAYBE,
        designation="Analyst",
        is_candidate_pool=True,
    )
    defaults.update(overrides)
    return Profile(**defaults)


@pytest.fixture
def male_customer() -> Profile:
    """创建示例男性客户（约 30 岁，收入 800000，身高 180，想要孩子）。"""
    return make_profile(
        "cust-m",
        Gender.MALE,
        first_name="Arjun",
        last_name="Sharma",
        date_of_birth=date(1995, 6, 15),
        income=800_000,
        height=180,
        wants_kids=Preference.YES,
        designation="Software Engineer",
        city="Mumbai",
        is_candidate_pool=False,
    )


@pytest.fixture
def female_customer() -> Profile:
    """创建示例女性客户。"""
    return make_profile(
        "cust-f",
        Gender.FEMALE,
        first_name="Priya",
        last_name="Mehta",
        date_of_birth=date(1994, 2, 1),
        income=900_000,
        height=162,
        religion="Jain",
        caste="General",
        open_to_relocate=Preference.NO,
        languages=("English", "Gujarati"),
        designation="Consultant",
        city="Ahmedabad",
        is_candidate_pool=False,
    )


@pytest.fixture
def eligible_female() -> Profile:
    """满足男性客户全部四个条件的候选人。"""
    return make_profile(
        "cand-ok",
        Gender.FEMALE,
        first_name="Kavya",
        date_of_birth=date(1998, 3, 10),
        income=600_000,
        height=165,
        wants_kids=Preference.YES,
    )


@pytest.fixture
def male_pool(eligible_female) -> list[Profile]:
    """三个候选人：一个满足全部条件，两个不满足。"""
    return [
        make_profile(
            "cand-older",
            Gender.FEMALE,
            date_of_birth=date(1990, 1, 1),  # older than the customer
            income=600_000,
            height=165,
            wants_kids=Preference.YES,
        ),
        eligible_female,
        make_profile(
            "cand-kids",
            Gender.FEMALE,
            date_of_birth=date(1999, 1, 1),
            income=500_000,
            height=160,
            wants_kids=Preference.NO,  # differs on kids
        ),
    ]


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def mock_llm() -> MockLLMService:
    """创建 Mock LLM 服务。"""
    return MockLLMService()


@pytest.fixture
def failing_llm(mock_llm: MockLLMService) -> MockLLMService:
    """总是失败的 Mock LLM（模拟外部服务完全不可用）。"""
    mock_llm.should_fail = True
    mock_llm.max_failures = 999
    return mock_llm


@pytest.fixture
def blocking_llm():
    """挂起的 LLM；测试结束时释放 worker 线程。"""
    llm = BlockingLLMService()
    yield llm
    llm.release.set()


@pytest.fixture
def profile_store(male_customer, female_customer, male_pool) -> InMemoryProfileStore:
    return InMemoryProfileStore([male_customer, female_customer, *male_pool])


@pytest.fixture
def suggestion_store() -> InMemorySuggestionStore:
    return InMemorySuggestionStore()
