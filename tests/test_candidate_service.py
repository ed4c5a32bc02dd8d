"""CandidateService 单元测试。

测试覆盖:
- 男性客户的四个筛选条件
- 女性客户的匹配条件
- 候选池数量上限（不补齐、不放宽）
- 未知客户
"""

from datetime import date

import pytest

from conftest import make_profile
from src.models import Gender, Preference
from src.services.candidate_service import CandidateService
from src.services.profile_store import CustomerNotFoundError, InMemoryProfileStore


class TestMaleCustomerRule:
    """测试男性客户的筛选规则。"""

    def test_selects_only_candidate_satisfying_all_predicates(self, male_customer, male_pool):
        """三个候选人中只有一个满足全部条件。"""
        service = CandidateService(InMemoryProfileStore([male_customer, *male_pool]))

        selected = service.select_candidates(male_customer, 10)

        assert [p.id for p in selected] == ["cand-ok"]

    def test_every_selected_candidate_satisfies_rule(self, male_customer):
        pool = [
            make_profile(f"f{i}", Gender.FEMALE,
                         date_of_birth=date(1990 + i, 1, 1),
                         income=800_000 - i * 30_000,
                         height=185 - i * 3,
                         wants_kids=Preference.YES if i % 2 else Preference.NO)
            for i in range(10)
        ]
        service = CandidateService(InMemoryProfileStore([male_customer, *pool]))

        selected = service.select_candidates(male_customer, 10)

        assert selected
        for p in selected:
            assert p.gender is Gender.FEMALE
            assert p.date_of_birth > male_customer.date_of_birth
            assert p.income < male_customer.income
            assert p.height < male_customer.height
            assert p.wants_kids is male_customer.wants_kids

    def test_equal_income_and_height_are_excluded(self, male_customer):
        """边界值: 收入或身高相同都不算 "更低"。"""
        same_income = make_profile("same-income", Gender.FEMALE, date_of_birth=date(1999, 1, 1),
                                   income=800_000, height=160)
        same_height = make_profile("same-height", Gender.FEMALE, date_of_birth=date(1999, 1, 1),
                                   income=500_000, height=180)
        same_dob = make_profile("same-dob", Gender.FEMALE, date_of_birth=date(1995, 6, 15),
                                income=500_000, height=160)
        service = CandidateService(
            InMemoryProfileStore([male_customer, same_income, same_height, same_dob])
        )

        assert service.select_candidates(male_customer) == []

    def test_unknown_date_of_birth_matches_nobody(self, eligible_female):
        customer = make_profile("no-dob", Gender.MALE, date_of_birth=None,
                                income=900_000, height=185)
        service = CandidateService(InMemoryProfileStore([customer, eligible_female]))

        assert service.select_candidates(customer) == []

    def test_male_candidates_are_never_selected(self, male_customer):
        other_male = make_profile("m2", Gender.MALE, date_of_birth=date(1999, 1, 1),
                                  income=500_000, height=170)
        service = CandidateService(InMemoryProfileStore([male_customer, other_male]))

        assert service.select_candidates(male_customer) == []


class TestFemaleCustomerRule:
    """测试女性客户的筛选规则。"""

    def test_matches_relocation_religion_and_caste(self, female_customer):
        match = make_profile("m-ok", Gender.MALE, religion="Jain", caste="General",
                             open_to_relocate=Preference.NO)
        wrong_religion = make_profile("m-rel", Gender.MALE, religion="Hindu", caste="General",
                                      open_to_relocate=Preference.NO)
        wrong_caste = make_profile("m-caste", Gender.MALE, religion="Jain", caste="OBC",
                                   open_to_relocate=Preference.NO)
        wrong_relocate = make_profile("m-reloc", Gender.MALE, religion="Jain", caste="General",
                                      open_to_relocate=Preference.YES)
        service = CandidateService(InMemoryProfileStore(
            [female_customer, match, wrong_religion, wrong_caste, wrong_relocate]
        ))

        selected = service.select_candidates(female_customer)

        assert [p.id for p in selected] == ["m-ok"]

    def test_age_income_and_height_do_not_matter(self, female_customer):
        younger_poorer_shorter = make_profile(
            "m-any", Gender.MALE, religion="Jain", caste="General",
            open_to_relocate=Preference.NO,
            date_of_birth=date(2000, 1, 1), income=100_000, height=150,
        )
        service = CandidateService(InMemoryProfileStore([female_customer, younger_poorer_shorter]))

        assert [p.id for p in service.select_candidates(female_customer)] == ["m-any"]


class TestPoolBounds:
    """测试候选池上限。"""

    def test_pool_is_capped_at_limit_in_store_order(self, female_customer):
        pool = [
            make_profile(f"m{i}", Gender.MALE, religion="Jain", open_to_relocate=Preference.NO)
            for i in range(15)
        ]
        service = CandidateService(InMemoryProfileStore([female_customer, *pool]))

        selected = service.select_candidates(female_customer, 10)

        assert [p.id for p in selected] == [f"m{i}" for i in range(10)]

    def test_fewer_matches_than_limit_are_returned_without_padding(self, male_customer, male_pool):
        service = CandidateService(InMemoryProfileStore([male_customer, *male_pool]))

        assert len(service.select_candidates(male_customer, 5)) == 1

    def test_non_positive_limit_is_rejected(self, male_customer):
        service = CandidateService(InMemoryProfileStore([male_customer]))

        with pytest.raises(ValueError):
            service.select_candidates(male_customer, 0)

    def test_candidate_pool_only_excludes_real_customers(self, female_customer):
        real = make_profile("m-real", Gender.MALE, religion="Jain",
                            open_to_relocate=Preference.NO, is_candidate_pool=False)
        synthetic = make_profile("m-pool", Gender.MALE, religion="Jain",
                                 open_to_relocate=Preference.NO, is_candidate_pool=True)
        store = InMemoryProfileStore([female_customer, real, synthetic])

        assert len(CandidateService(store).select_candidates(female_customer)) == 2
        pool_only = CandidateService(store, candidate_pool_only=True)
        assert [p.id for p in pool_only.select_candidates(female_customer)] == ["m-pool"]


class TestSelectForId:
    """测试按 id 查找客户。"""

    def test_resolves_customer_and_pool(self, profile_store):
        customer, pool = CandidateService(profile_store).select_for_id("cust-m")

        assert customer.id == "cust-m"
        assert [p.id for p in pool] == ["cand-ok"]

    def test_unknown_customer_raises_not_found(self, profile_store):
        with pytest.raises(CustomerNotFoundError):
            CandidateService(profile_store).select_for_id("missing")
