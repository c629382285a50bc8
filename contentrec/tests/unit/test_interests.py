import pytest

from contentrec.models.activity import ActivityRecord, Interactions
from contentrec.services.interests import JoinedActivity, extract_interests
from contentrec.services.scoring import InterestWeights, activity_engagement_score
from contentrec.tests.conftest import make_item, visit


def joined(item, read=0.0, liked=False, commented=False, shared=False):
    record = ActivityRecord(
        user="u1",
        item=item.id if item else "gone",
        read_percentage=read,
        interactions=Interactions(liked=liked, commented=commented, shared=shared),
    )
    return JoinedActivity(record=record, content=item)


class TestEngagementScore:

    def test_flags_are_additive(self):
        record = ActivityRecord(
            user="u1", item="a", read_percentage=100,
            interactions=Interactions(liked=True, commented=True, shared=True),
        )
        assert activity_engagement_score(record, InterestWeights()) == pytest.approx(2.5)

    def test_read_depth_only(self):
        record = ActivityRecord(user="u1", item="a", read_percentage=45)
        assert activity_engagement_score(record, InterestWeights()) == pytest.approx(0.45)

    def test_custom_weights(self):
        record = ActivityRecord(user="u1", item="a", interactions=Interactions(liked=True))
        assert activity_engagement_score(record, InterestWeights(like=2.0)) == pytest.approx(2.0)


class TestExtractInterests:

    def test_empty_history_gives_empty_profile(self):
        profile = extract_interests([])
        assert profile.categories == []
        assert profile.tags == []
        assert profile.is_empty()

    def test_category_scores_accumulate(self):
        a = make_item("a", "tech")
        b = make_item("b", "tech")
        c = make_item("c", "science")
        profile = extract_interests([
            joined(a, read=90, liked=True),
            joined(b, read=40),
            joined(c, read=100),
        ])

        assert profile.category_names == ["tech", "science"]
        assert profile.categories[0].weight == pytest.approx(1.6)
        assert profile.categories[1].weight == pytest.approx(1.0)

    def test_each_tag_gets_the_full_score(self):
        item = make_item("a", "tech", ["python", "web"])
        profile = extract_interests([joined(item, read=50, shared=True)])

        assert {t.name: t.weight for t in profile.tags} == {
            "python": pytest.approx(1.2),
            "web": pytest.approx(1.2),
        }

    def test_caps_at_five_categories_and_ten_tags(self):
        activities = [
            joined(make_item(f"i{n}", f"cat{n}", [f"tag{n}", f"extra{n}"]), read=n * 5)
            for n in range(12)
        ]
        profile = extract_interests(activities)

        assert len(profile.categories) == 5
        assert len(profile.tags) == 10
        assert profile.category_names == ["cat11", "cat10", "cat9", "cat8", "cat7"]
        weights = [t.weight for t in profile.tags]
        assert weights == sorted(weights, reverse=True)

    def test_ties_keep_first_seen_order(self):
        profile = extract_interests([
            joined(make_item("a", "zeta"), read=50),
            joined(make_item("b", "alpha"), read=50),
        ])
        assert profile.category_names == ["zeta", "alpha"]

    def test_deleted_items_are_skipped(self):
        profile = extract_interests([
            joined(None, read=100, liked=True),
            joined(make_item("a", "tech"), read=20),
        ])
        assert profile.category_names == ["tech"]
        assert profile.categories[0].weight == pytest.approx(0.2)

    def test_limits_come_from_weights(self):
        activities = [joined(make_item(f"i{n}", f"cat{n}", [f"t{n}"]), read=50) for n in range(4)]
        profile = extract_interests(activities, InterestWeights(max_categories=2, max_tags=1))
        assert len(profile.categories) == 2
        assert len(profile.tags) == 1


class TestInterestProfileForUser:

    @pytest.mark.asyncio
    async def test_profile_joins_catalog_metadata(self, recommendation_service, activity_repo):
        await visit(activity_repo, "u1", "tech-1", read_percentage=90, liked=True)
        await visit(activity_repo, "u1", "tech-2", read_percentage=40)

        profile = await recommendation_service.get_interest_profile("u1")

        assert profile.category_names == ["tech"]
        assert profile.categories[0].weight == pytest.approx(1.6)
        assert profile.tag_names[0] == "python"
        assert profile.tags[0].weight == pytest.approx(1.6)

    @pytest.mark.asyncio
    async def test_unknown_user_has_empty_profile(self, recommendation_service):
        profile = await recommendation_service.get_interest_profile("nobody")
        assert profile.is_empty()
