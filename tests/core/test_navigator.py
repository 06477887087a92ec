"""Tests for the navigation state machine."""

from __future__ import annotations

from unittest.mock import Mock

from cmdnav.core.model import CommandNode, UsageSpec
from cmdnav.core.navigator import PREVIEW_HELP, Focus, Navigator
from cmdnav.core.values import CountValue, TextValue
from cmdnav.spec_loader import spec_from_dict


def names(items):
    return [item.name for item in items]


class TestInitialState:
    def test_starts_at_root_on_commands(self, spec) -> None:
        nav = Navigator(spec)
        assert nav.at_root
        assert nav.command_path == []
        assert nav.focus is Focus.COMMANDS
        assert not nav.editing
        assert not nav.filtering

    def test_hidden_items_are_not_listed(self, spec) -> None:
        nav = Navigator(spec)
        assert names(nav.visible_subcommands()) == ["init", "config", "run", "deploy"]
        assert names(nav.visible_flags()) == ["verbose", "color", "dry-run"]

    def test_root_flags_initialized(self, spec) -> None:
        nav = Navigator(spec)
        assert nav.store.is_initialized(())

    def test_leaf_spec_starts_on_preview(self) -> None:
        spec = UsageSpec(name="t", bin="t", root=CommandNode(name="t"))
        assert Navigator(spec).focus is Focus.PREVIEW


class TestTransitions:
    def test_enter_and_leave(self, spec) -> None:
        logger = Mock()
        nav = Navigator(spec, debug_logger=logger)
        assert nav.enter("config")
        assert nav.command_path == ["config"]
        assert nav.leave()
        assert nav.at_root
        assert logger.call_count == 2

    def test_enter_unknown_or_hidden_is_noop(self, spec) -> None:
        nav = Navigator(spec)
        assert not nav.enter("missing")
        assert not nav.enter("debug")
        assert nav.at_root

    def test_enter_by_alias_pushes_canonical_name(self, spec) -> None:
        nav = Navigator(spec)
        assert nav.enter("push")
        assert nav.command_path == ["deploy"]

    def test_leave_at_root_is_noop(self, spec) -> None:
        nav = Navigator(spec)
        assert not nav.leave()
        assert nav.at_root

    def test_enter_resets_selection_and_filter(self, spec) -> None:
        nav = Navigator(spec)
        nav.move_selection(2)
        nav.start_filtering()
        nav.set_filter_text("c")
        nav.enter("config")
        assert nav.selected_index(Focus.COMMANDS) == 0
        assert not nav.filtering
        assert nav.filter_text == ""

    def test_child_flags_include_globals_after_own(self, spec) -> None:
        nav = Navigator(spec)
        nav.enter("run")
        assert names(nav.all_flags()) == ["jobs", "force", "verbose", "color"]

    def test_hidden_global_does_not_take_over_child_flag(self) -> None:
        spec = spec_from_dict(
            {
                "bin": "t",
                "flags": [{"long": ["token"], "global": True, "hide": True}],
                "subcommands": [{"name": "login", "flags": [{"long": ["token"], "arg": "T"}]}],
            }
        )
        nav = Navigator(spec)
        assert nav.all_flags() == []
        nav.enter("login")
        assert names(nav.all_flags()) == ["token"]
        token = nav.all_flags()[0]
        nav.set_flag_value(token, TextValue("abc"))
        assert "token" in nav.store.get(("login",))
        assert nav.synthesize() == "t login --token abc"

    def test_global_values_shared_across_paths(self, spec) -> None:
        nav = Navigator(spec)
        verbose = spec.global_flags()[0]
        nav.toggle_flag(verbose)
        nav.enter("run")
        assert nav.flag_value(verbose) == CountValue(1)
        assert verbose.name not in nav.store.get(("run",))

    def test_navigate_to(self, spec) -> None:
        nav = Navigator(spec)
        nav.navigate_to(["config", "set"])
        assert nav.command_path == ["config", "set"]
        nav.navigate_to(["run", "bogus"])
        assert nav.command_path == ["run"]

    def test_leave_and_reenter_preserves_typed_text(self, spec) -> None:
        nav = Navigator(spec)
        nav.enter("run")
        jobs = nav.all_flags()[0]
        nav.set_flag_value(jobs, TextValue("12"))
        nav.arg_values[0].value = "lint"
        nav.leave()
        nav.enter("run")
        assert nav.flag_value(jobs) == TextValue("12")
        assert nav.arg_values[0].value == "lint"
        assert nav.synthesize() == "mycli run --jobs 12 lint"

    def test_arg_text_is_per_path(self, spec) -> None:
        nav = Navigator(spec)
        nav.navigate_to(["config", "get"])
        nav.arg_values[0].value = "user.name"
        nav.navigate_to(["config", "set"])
        assert nav.arg_values[0].value == ""


class TestFocus:
    def test_cycle_skips_empty_panels(self, spec) -> None:
        nav = Navigator(spec)
        # root has no args
        assert nav.available_panels() == [Focus.COMMANDS, Focus.FLAGS, Focus.PREVIEW]
        nav.focus_next()
        assert nav.focus is Focus.FLAGS
        nav.focus_next()
        assert nav.focus is Focus.PREVIEW
        nav.focus_next()
        assert nav.focus is Focus.COMMANDS
        nav.focus_prev()
        assert nav.focus is Focus.PREVIEW

    def test_focus_repaired_after_sync(self, spec) -> None:
        nav = Navigator(spec)
        nav.navigate_to(["config", "get"])
        # no subcommands here; focus falls to the first non-empty panel
        assert nav.focus is Focus.FLAGS

    def test_focus_kept_when_still_available(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_focus(Focus.FLAGS)
        nav.enter("run")
        assert nav.focus is Focus.FLAGS

    def test_set_focus_rejects_empty_panel(self, spec) -> None:
        nav = Navigator(spec)
        assert not nav.set_focus(Focus.ARGS)
        assert nav.focus is Focus.COMMANDS

    def test_focus_change_clears_filter(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_filter_text("cfg")
        nav.focus_next()
        assert nav.filter_text == ""


class TestSelection:
    def test_move_clamps_without_wraparound(self, spec) -> None:
        nav = Navigator(spec)
        nav.move_selection(-1)
        assert nav.selected_index(Focus.COMMANDS) == 0
        nav.move_selection(100)
        assert nav.selected_index(Focus.COMMANDS) == 3
        assert nav.selected_subcommand().name == "deploy"

    def test_viewport_keeps_selection_visible(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_viewport(Focus.COMMANDS, 2)
        nav.move_selection(3)
        assert nav.scroll_offset(Focus.COMMANDS) == 2
        nav.move_selection(-3)
        assert nav.scroll_offset(Focus.COMMANDS) == 0

    def test_growing_viewport_clamps_scroll(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_viewport(Focus.COMMANDS, 1)
        nav.select_last()
        assert nav.scroll_offset(Focus.COMMANDS) == 3
        nav.set_viewport(Focus.COMMANDS, 10)
        assert nav.scroll_offset(Focus.COMMANDS) == 0

    def test_move_on_preview_is_noop(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_focus(Focus.PREVIEW)
        nav.move_selection(1)
        assert nav.focus is Focus.PREVIEW


class TestFiltering:
    def test_cfg_leaves_only_config(self, spec) -> None:
        nav = Navigator(spec)
        nav.move_selection(2)
        nav.start_filtering()
        for ch in "cfg":
            nav.set_filter_text(nav.filter_text + ch)
        assert names(nav.visible_subcommands()) == ["config"]
        assert nav.selected_index(Focus.COMMANDS) == 0
        assert nav.selected_subcommand().name == "config"

    def test_filter_matches_aliases(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_filter_text("push")
        assert names(nav.visible_subcommands()) == ["deploy"]

    def test_filter_matches_help_text(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_filter_text("project")
        assert names(nav.visible_subcommands()) == ["init"]

    def test_filter_applies_only_to_focused_panel(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_filter_text("zzz")
        assert nav.visible_subcommands() == []
        assert len(nav.visible_flags()) == 3
        assert nav.match_scores(Focus.FLAGS) == {}

    def test_flag_filter_matches_label(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_focus(Focus.FLAGS)
        nav.set_filter_text("-v")
        assert names(nav.visible_flags()) == ["verbose"]
        assert nav.match_scores(Focus.FLAGS)["verbose"].name_positions == (0, 1)

    def test_stop_filtering(self, spec) -> None:
        nav = Navigator(spec)
        nav.start_filtering()
        nav.set_filter_text("run")
        nav.stop_filtering(keep=True)
        assert not nav.filtering
        assert names(nav.visible_subcommands()) == ["run"]
        nav.start_filtering()
        nav.set_filter_text("r")
        nav.stop_filtering(keep=False)
        assert nav.filter_text == ""
        assert len(nav.visible_subcommands()) == 4

    def test_selection_clamped_after_list_shrinks(self, spec) -> None:
        nav = Navigator(spec)
        nav.move_selection(3)
        nav.state.filter_text = "run"
        nav.stop_filtering(keep=True)
        assert nav.selected_index(Focus.COMMANDS) == 0
        assert nav.selected_subcommand().name == "run"

    def test_empty_filter_result_has_no_selection(self, spec) -> None:
        nav = Navigator(spec)
        nav.set_filter_text("zzz")
        assert nav.selected_subcommand() is None
        assert nav.current_help() is None


class TestFlagValues:
    def test_toggle_boolean(self, spec) -> None:
        nav = Navigator(spec)
        dry_run = spec.root.flags[2]
        nav.toggle_flag(dry_run)
        nav.toggle_flag(dry_run)
        assert nav.synthesize() == "mycli"

    def test_counted_increment_then_decrement_returns_to_zero(self, spec) -> None:
        nav = Navigator(spec)
        verbose = spec.global_flags()[0]
        for _ in range(5):
            nav.toggle_flag(verbose)
        for _ in range(5):
            nav.decrement_flag(verbose)
        assert nav.flag_value(verbose) == CountValue(0)
        nav.decrement_flag(verbose)
        assert nav.flag_value(verbose) == CountValue(0)

    def test_toggle_ignores_valued_flag(self, spec) -> None:
        nav = Navigator(spec)
        color = spec.global_flags()[1]
        nav.toggle_flag(color)
        assert nav.flag_value(color) == TextValue("")

    def test_cycle_flag_choice(self, spec) -> None:
        nav = Navigator(spec)
        color = spec.global_flags()[1]
        nav.cycle_flag_choice(color)
        assert nav.flag_value(color) == TextValue("auto")
        nav.cycle_flag_choice(color)
        assert nav.flag_value(color) == TextValue("always")

    def test_deploy_environment_cycles_dev_then_staging(self, spec) -> None:
        nav = Navigator(spec)
        nav.enter("deploy")
        environment = nav.arg_values[0]
        assert environment.value == ""
        nav.cycle_arg_choice(environment)
        assert environment.value == "dev"
        nav.cycle_arg_choice(environment)
        assert environment.value == "staging"


class TestEditing:
    def test_edit_valued_flag(self, spec) -> None:
        nav = Navigator(spec)
        nav.enter("run")
        nav.set_focus(Focus.FLAGS)
        assert nav.start_editing()
        assert nav.is_edit_target(Focus.FLAGS, "jobs")
        nav.set_edit_text("3")
        assert nav.edit_text == "3"
        assert nav.synthesize() == "mycli run --jobs 3"
        nav.finish_editing()
        assert not nav.editing
        assert nav.edit_text == ""

    def test_cannot_edit_boolean_or_choice(self, spec) -> None:
        nav = Navigator(spec)
        nav.enter("run")
        nav.set_focus(Focus.FLAGS)
        nav.move_selection(1)
        assert not nav.start_editing()
        nav.leave()
        nav.enter("deploy")
        nav.set_focus(Focus.ARGS)
        assert not nav.start_editing()

    def test_edit_arg(self, spec) -> None:
        nav = Navigator(spec)
        nav.enter("init")
        assert nav.set_focus(Focus.ARGS)
        assert nav.start_editing()
        nav.set_edit_text("my app")
        assert nav.synthesize() == 'mycli init "my app"'

    def test_leaving_finishes_editing(self, spec) -> None:
        nav = Navigator(spec)
        nav.enter("init")
        nav.start_editing()
        nav.leave()
        assert not nav.editing


class TestHelp:
    def test_current_help_follows_focus(self, spec) -> None:
        nav = Navigator(spec)
        assert nav.current_help() == "Create a new project"
        nav.set_focus(Focus.FLAGS)
        assert nav.current_help() == "More output"
        nav.set_focus(Focus.PREVIEW)
        assert nav.current_help() == PREVIEW_HELP
