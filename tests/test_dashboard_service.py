"""Tests for the dashboard pipeline entry point, variants and upload gate."""

import json
import math

import pytest

from circus_analytics.application.dashboard_service import MissingInputError, run_dashboard_pipeline
from circus_analytics.application.upload_session import UploadSession
from circus_analytics.config import VARIANTS, MetricFields, TruncationMode, get_variant
from circus_analytics.domain.models import LanguageTag

F = MetricFields()


def _raw(title, streams, catalogue="Circus Daily", jour=None, comp100=None, **extra):
    row = {F.title: title, F.catalogue: catalogue, F.streams: streams}
    if jour is not None:
        row[F.date] = jour
    if comp100 is not None:
        row[F.comp100] = comp100
    row.update(extra)
    return row


# ── End-to-end ───────────────────────────────────────────────────────


def test_duplicate_titles_collapse_end_to_end():
    rows = [
        {"video": "Goal!", "catalogue": "Circus Daily", "Streams": "100", "jour": "2024-02-10", "Complétion Vidéo 100%": "50"},
        {"video": "Goal!", "catalogue": "Circus Daily", "Streams": "50", "jour": "2024-02-11", "Complétion Vidéo 100%": "30"},
    ]
    summary = run_dashboard_pipeline(rows, None, get_variant("circus_top100"))

    assert len(summary.target_videos) == 1
    video = summary.target_videos[0]
    assert video.title == "Goal!"
    assert video.streams == 150.0
    assert video.comp100 == 40.0
    assert video.date_day == "2024-02-10"

    stats = summary.target_stats
    assert stats.count == 1
    assert stats.total_streams == 150.0
    assert stats.avg_streams_per_video == 150.0
    assert stats.comp100 == 40.0
    assert [bucket.month for bucket in summary.monthly] == ["2024-02"]


def test_only_target_catalogue_rows_are_analysed():
    rows = [_raw("A", 10), _raw("B", 20, catalogue="Other"), _raw("C", 30, catalogue="")]
    summary = run_dashboard_pipeline(rows, None, get_variant("circus_top100"))
    assert [video.title for video in summary.target_videos] == ["A"]


def test_no_matching_rows_gives_zero_summary():
    summary = run_dashboard_pipeline([_raw("A", 10, catalogue="Other")], None, get_variant("circus_top100"))
    assert summary.target_stats.count == 0
    assert summary.target_stats.avg_streams_per_video == 0.0
    assert summary.monthly == ()
    assert summary.leaderboards["target"] == ()
    assert summary.target_videos == ()


def test_single_source_variant_ignores_reference():
    summary = run_dashboard_pipeline([_raw("A", 10)], [_raw("Pro League", 5)], get_variant("circus_top100"))
    assert summary.reference_stats is None
    assert "reference" not in summary.leaderboards
    assert summary.language_breakdown is None


def test_leaderboard_is_ranked_prefix_of_selection():
    rows = [_raw(f"v{idx}", idx) for idx in range(30)]
    summary = run_dashboard_pipeline(rows, None, get_variant("circus_top100"))
    board = summary.leaderboards["target"]
    assert len(board) == 10
    assert [video.title for video in board] == [f"v{idx}" for idx in range(29, 19, -1)]
    assert len(summary.target_videos) == 30


def test_summary_serialises_to_json():
    rows = [_raw("A", 10, jour="2024-01-01", comp100=50)]
    reference = [_raw("Pro League recap", 20, catalogue="Publisher")]
    summary = run_dashboard_pipeline(rows, reference, get_variant("publisher_language"))
    payload = json.loads(json.dumps(summary.to_dict()))
    assert payload["variant"] == "publisher_language"
    assert payload["target_stats"]["count"] == 1
    assert payload["reference_stats"]["count"] == 1
    assert payload["funnel"][0] == {"stage": "Start", "target": 100.0, "reference": 100.0}
    assert payload["leaderboards"]["target"][0]["title"] == "A"


def test_summary_frames_are_named_per_sheet():
    rows = [_raw("Résumé: victoire des Diables Rouges", 10, jour="2024-01-01"), _raw("Highlights", 5)]
    reference = [_raw("Pro League recap", 20, catalogue="Publisher")]
    frames = run_dashboard_pipeline(rows, reference, get_variant("publisher_language")).to_frames()
    assert set(frames) == {
        "stats",
        "target_videos",
        "reference_videos",
        "monthly",
        "funnel",
        "dropoff",
        "benchmarks",
        "leaderboard_target",
        "leaderboard_reference",
        "languages",
    }
    assert frames["languages"]["language"].to_list() == ["FR", "NL"]
    assert frames["languages"]["count"].to_list() == [1, 1]
    assert frames["stats"]["side"].to_list() == ["target", "reference"]


def test_single_source_frames_skip_reference_and_languages():
    frames = run_dashboard_pipeline([_raw("A", 10)], None, get_variant("circus_top100")).to_frames()
    assert "reference_videos" not in frames
    assert "leaderboard_reference" not in frames
    assert "languages" not in frames
    assert frames["leaderboard_target"]["title"].to_list() == ["A"]


def test_leaderboards_cannot_be_mutated():
    summary = run_dashboard_pipeline([_raw("A", 10)], None, get_variant("circus_top100"))
    with pytest.raises(TypeError):
        summary.leaderboards["target"] = ()
    with pytest.raises(TypeError):
        summary.leaderboards["reference"] = ()
    assert [video.title for video in summary.leaderboards["target"]] == ["A"]


def test_huge_stream_counts_do_not_escape_the_pipeline():
    rows = [_raw("A", 1e308), _raw("B", 1e308), _raw("C", 1e308), _raw("C", 1e308)]
    summary = run_dashboard_pipeline(rows, None, get_variant("circus_top100"))
    assert summary.target_stats.count == 3
    assert summary.target_stats.total_streams == 0.0
    assert all(math.isfinite(video.streams) for video in summary.target_videos)


# ── Truncation modes ─────────────────────────────────────────────────


def _truncation_rows():
    return [_raw("A", 10), _raw("A", 5), _raw("B", 100), _raw("C", 1000)]


def test_head_before_grouping_uses_source_order():
    config = get_variant("circus_top100").with_overrides(
        truncation=TruncationMode.HEAD_BEFORE_GROUPING, selection_size=2
    )
    summary = run_dashboard_pipeline(_truncation_rows(), None, config)
    assert [(video.title, video.streams) for video in summary.target_videos] == [("A", 15.0)]


def test_rank_after_grouping_uses_stream_order():
    config = get_variant("circus_top100").with_overrides(selection_size=2)
    summary = run_dashboard_pipeline(_truncation_rows(), None, config)
    assert [video.title for video in summary.target_videos] == ["C", "B"]


def test_shipped_variants_are_configured():
    assert set(VARIANTS) == {"circus_top100", "publisher_head100", "publisher_ranked", "publisher_language"}
    assert get_variant("publisher_head100").truncation is TruncationMode.HEAD_BEFORE_GROUPING
    assert get_variant("publisher_ranked").leaderboard_size == 15
    assert get_variant("publisher_language").classify_language
    assert not get_variant("circus_top100").requires_reference
    assert get_variant("circus_top100").target_sheet_name == "Raw data"
    assert get_variant("publisher_ranked").reference_sheet_name is None


def test_unknown_variant_is_rejected():
    with pytest.raises(ValueError, match="Unknown dashboard variant"):
        get_variant("nope")


# ── Reference comparison ─────────────────────────────────────────────


def test_reference_rows_are_selected_by_keyword():
    target = [_raw("A", 100, comp100=20, **{F.comp25: 80, F.comp50: 60, F.comp75: 40})]
    reference = [
        _raw("Jupiler Pro League: Genk - Gent", 300, catalogue="Publisher", comp100=30,
             **{F.comp25: 90, F.comp50: 70, F.comp75: 50}),
        _raw("Tennis final", 999, catalogue="Publisher"),
    ]
    summary = run_dashboard_pipeline(target, reference, get_variant("publisher_ranked"))

    assert summary.reference_stats.count == 1
    assert summary.reference_stats.total_streams == 300.0
    assert [video.title for video in summary.leaderboards["reference"]] == ["Jupiler Pro League: Genk - Gent"]
    assert [item.target for item in summary.dropoff] == [20.0, 20.0, 20.0, 20.0]
    assert [item.reference for item in summary.dropoff] == [10.0, 20.0, 20.0, 20.0]
    assert any("behind" in comment for comment in summary.comments)


def test_reference_is_required_by_two_source_variants():
    with pytest.raises(MissingInputError):
        run_dashboard_pipeline([_raw("A", 1)], None, get_variant("publisher_ranked"))


def test_target_is_always_required():
    with pytest.raises(MissingInputError):
        run_dashboard_pipeline(None, [], get_variant("circus_top100"))


def test_language_breakdown_lists_french_before_dutch():
    rows = [
        _raw("Samenvatting: overwinning van de Rode Duivels", 10),
        _raw("Résumé: victoire des Diables Rouges", 30),
        _raw("Highlights 2-1", 20),
    ]
    summary = run_dashboard_pipeline(rows, [], get_variant("publisher_language"))
    breakdown = summary.language_breakdown
    assert [item.language for item in breakdown] == [LanguageTag.FR, LanguageTag.NL]
    assert breakdown[0].stats.count == 1
    assert breakdown[0].stats.total_streams == 30.0
    assert breakdown[1].stats.count == 2
    assert all(video.language is not None for video in summary.target_videos)


# ── Benchmarks ───────────────────────────────────────────────────────


def test_benchmark_comparisons_and_recommendations_below_market():
    rows = [_raw("A", 1000, comp100=34, **{F.view_time: 1.05})]
    summary = run_dashboard_pipeline(rows, None, get_variant("circus_top100"))
    headline = {item.metric: item for item in summary.benchmark_comparisons}

    streams = headline["streams_per_video"]
    assert streams.benchmark == 4200.0
    assert not streams.is_above
    assert streams.gap == 3200.0
    assert streams.diff_pct == pytest.approx(-76.19, abs=0.01)
    assert headline["completion_rate"].diff_pct == pytest.approx(-50.0)
    assert headline["view_time"].gap == pytest.approx(1.05)

    assert [item.label for item in summary.checkpoint_comparisons] == [
        "25% Watched",
        "50% Watched",
        "75% Watched",
        "100% Completed",
    ]
    assert len(summary.recommendations) == 4


def test_recommendations_when_at_or_above_market():
    rows = [_raw("A", 5000, comp100=80, **{F.view_time: 3.0})]
    summary = run_dashboard_pipeline(rows, None, get_variant("circus_top100"))
    assert all(item.gap == 0.0 for item in summary.benchmark_comparisons)
    assert len(summary.recommendations) == 1
    assert summary.recommendations[0].startswith("At or above market")


# ── Upload session gate ──────────────────────────────────────────────


def test_session_waits_for_reference_in_two_source_variants():
    session = UploadSession(config=get_variant("publisher_ranked"))
    assert not session.is_ready()
    assert session.run_if_ready() is None

    session.set_target([_raw("A", 1)])
    assert not session.is_ready()
    assert session.missing_inputs() == ["reference"]
    assert session.run_if_ready() is None

    session.set_reference([_raw("Pro League", 2, catalogue="Publisher")])
    assert session.is_ready()
    summary = session.run_if_ready()
    assert summary is not None
    assert summary.reference_stats.count == 1


def test_session_single_source_is_ready_with_target_only():
    session = UploadSession(config=get_variant("circus_top100"))
    assert session.missing_inputs() == ["target"]
    session.set_target([_raw("A", 1)])
    assert session.is_ready()
    assert session.run_if_ready().target_stats.count == 1


def test_session_replaces_buffers_wholesale():
    session = UploadSession(config=get_variant("circus_top100"))
    session.set_target([_raw("A", 1), _raw("B", 2)])
    session.set_target([_raw("C", 3)])
    summary = session.run_if_ready()
    assert [video.title for video in summary.target_videos] == ["C"]
