"""Click CLI for authoring and checking gardenforge content."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from .balance.power import dps, power
from .balance.report import render_text, report_dict, write_report
from .balance.roster_check import check_roster, role_anomalies
from .balance.usage import enemy_usage, render_usage, usage_dict
from .balance.validator import validate_catalog
from .core.config import Settings, active_profiles, load_settings
from .core.difficulty import DIFFICULTY_ORDER
from .core.errors import ContentError
from .core.storage import MissionCatalog, RosterStore
from .systems.role_assigner import assign_roles, role_distribution
from .systems.wave_director import create_mission


def get_settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _enemies(settings: Settings) -> RosterStore:
    return RosterStore.load(settings.enemies_file)


def _allies(settings: Settings) -> RosterStore:
    return RosterStore.load(settings.allies_file)


def _catalog(settings: Settings) -> MissionCatalog:
    return MissionCatalog.load(settings.stages_file)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory holding enemies.json, allies.json and stages.json.",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[Path]) -> None:
    """Balance and content tools for the garden lane-battle game."""
    ctx.ensure_object(dict)
    settings = load_settings()
    if data_dir is not None:
        settings = replace(settings, data_dir=data_dir)
    ctx.obj["settings"] = settings


# --- Stage authoring ---


@cli.command("new-stage")
@click.argument("difficulty")
@click.argument("stage_id")
@click.option("--dry-run", is_flag=True, help="Print the stage without saving it.")
@click.pass_context
def new_stage(ctx: click.Context, difficulty: str, stage_id: str, dry_run: bool) -> None:
    """Generate a stage for DIFFICULTY and append it as STAGE_ID."""
    settings = get_settings(ctx)
    try:
        catalog = _catalog(settings)
        result = create_mission(
            catalog, _enemies(settings), difficulty, stage_id,
            profiles=active_profiles(settings), dry_run=dry_run,
        )
        if not dry_run:
            catalog.save()
    except ContentError as e:
        raise click.ClickException(str(e))

    m = result.mission
    click.echo(f"=== {m.id} ({m.difficulty}) ===")
    click.echo(f"Castle HP: {m.enemy_castle_hp}  Base HP: {m.base_castle_hp}  Length: {m.length}")
    click.echo(f"Enemies: {m.enemy_count} in {len(m.waves)} waves  Reward: {m.reward.currency}")
    for i, w in enumerate(m.waves, 1):
        click.echo(f"  wave {i}: {w.count} x {w.combatant_id} @ {w.spawn_time_ms}ms every {w.interval_ms}ms")
    click.echo(
        f"Strength: {result.strength.strength:.0f} / target {result.target_strength:.0f} "
        f"({result.target_pct:.0f}%)"
    )
    if dry_run:
        click.echo("Dry run: catalog not modified.")
    else:
        click.echo(f"Saved to {catalog.path}")


@cli.command()
@click.pass_context
def profiles(ctx: click.Context) -> None:
    """List difficulty targets and how many stages use each."""
    settings = get_settings(ctx)
    try:
        table = active_profiles(settings)
        catalog = _catalog(settings)
    except ContentError as e:
        raise click.ClickException(str(e))

    click.echo(f"{'difficulty':<13} {'zone':<7} {'strength':>8} {'castle':>9} {'enemies':>7}  rarities       stages")
    for label in DIFFICULTY_ORDER:
        p = table.get(label)
        n = len(catalog.by_difficulty(label))
        if p is None:
            click.echo(f"{label:<13} {'-':<7} {'-':>8} {'-':>9} {'-':>7}  {'(hand-made)':<14} {n}")
            continue
        click.echo(
            f"{label:<13} {p.zone:<7} {p.target_strength:>8.0f} {p.target_castle_hp:>9} "
            f"{p.target_enemy_count:>7}  {','.join(p.allowed_rarities):<14} {n}"
        )


# --- Balance checks ---


@cli.command()
@click.option("--out", "out_dir", type=click.Path(path_type=Path, file_okay=False), default=None,
              help="Where to write balance_report.json / .csv.")
@click.option("--json-only", is_flag=True, help="Print the JSON report instead of the text summary.")
@click.pass_context
def report(ctx: click.Context, out_dir: Optional[Path], json_only: bool) -> None:
    """Score every stage and check the difficulty curve."""
    settings = get_settings(ctx)
    try:
        rep = validate_catalog(_catalog(settings), _enemies(settings))
    except ContentError as e:
        raise click.ClickException(str(e))

    if json_only:
        click.echo(json.dumps(report_dict(rep), indent=2, ensure_ascii=False))
    else:
        click.echo(render_text(rep))
    for p in write_report(rep, out_dir or settings.report_dir):
        click.echo(f"Wrote {p}", err=True)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the usage summary as JSON.")
@click.pass_context
def usage(ctx: click.Context, as_json: bool) -> None:
    """Show which enemies each stage and difficulty uses."""
    settings = get_settings(ctx)
    try:
        roster = _enemies(settings)
        rep = enemy_usage(_catalog(settings), roster)
    except ContentError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(usage_dict(rep), indent=2, ensure_ascii=False))
    else:
        click.echo(render_usage(rep, roster))


@cli.command("roster-check")
@click.option("--strict-roles", is_flag=True, help="Also fail when a role contradicts the unit's stats.")
@click.pass_context
def roster_check(ctx: click.Context, strict_roles: bool) -> None:
    """Compare ally stats against the expected band of their rarity."""
    settings = get_settings(ctx)
    try:
        allies = _allies(settings)
        stats, anomalies = check_roster(allies)
        mismatches = role_anomalies(allies)
    except ContentError as e:
        raise click.ClickException(str(e))

    for rarity, st in stats.items():
        click.echo(f"--- {rarity} ({st.count} units) ---")
        click.echo(f"  cost {st.cost.min:.0f}-{st.cost.max:.0f} (avg {st.cost.avg:.0f})")
        click.echo(f"  hp   {st.hp.min:.0f}-{st.hp.max:.0f} (avg {st.hp.avg:.0f})")
        click.echo(f"  atk  {st.atk.min:.0f}-{st.atk.max:.0f} (avg {st.atk.avg:.0f})")
        click.echo(f"  dps  {st.dps.min:.0f}-{st.dps.max:.0f} (avg {st.dps.avg:.0f})")
        if st.spawn_cd:
            click.echo(f"  spawn cd {st.spawn_cd.min:.0f}-{st.spawn_cd.max:.0f}ms")

    if mismatches:
        click.echo(f"{len(mismatches)} role mismatches:")
        for r in mismatches:
            click.echo(f"  [{r.rarity}] {r.name} ({r.combatant_id}) role={r.role} stats suggest {r.detected}")
            for msg in r.issues:
                click.echo(f"      - {msg}")

    if not anomalies:
        click.echo("No anomalies.")
        if strict_roles and mismatches:
            ctx.exit(1)
        return
    click.echo(f"{len(anomalies)} anomalies:")
    for a in anomalies:
        click.echo(f"  [{a.rarity}] {a.name} ({a.combatant_id})")
        for msg in a.issues:
            click.echo(f"      - {msg}")
    ctx.exit(1)


@cli.command("power")
@click.pass_context
def power_list(ctx: click.Context) -> None:
    """List enemies by power (weakest first)."""
    settings = get_settings(ctx)
    try:
        roster = _enemies(settings)
    except ContentError as e:
        raise click.ClickException(str(e))

    click.echo(f"{'id':<24} {'rarity':<5} {'power':>8} {'dps':>8}")
    for u in sorted(roster.all(), key=power):
        tag = "  boss" if u.is_boss else ""
        click.echo(f"{u.id:<24} {u.rarity:<5} {power(u):>8.1f} {dps(u):>8.1f}{tag}")


# --- Roster authoring ---


@cli.command()
@click.option("--dry-run", is_flag=True, help="Show the new distribution without saving.")
@click.pass_context
def roles(ctx: click.Context, dry_run: bool) -> None:
    """Re-assign combat roles per rarity and write them back."""
    settings = get_settings(ctx)
    try:
        allies = _allies(settings)
        before = role_distribution(allies)
        results = assign_roles(allies)
        if not dry_run:
            allies.save()
    except ContentError as e:
        raise click.ClickException(str(e))

    after = role_distribution(allies)
    for rarity, res in results.items():
        click.echo(f"--- {rarity} ---")
        click.echo("  before: " + _dist(before.get(rarity, {})))
        click.echo("  after:  " + _dist(after.get(rarity, {})))
        click.echo("  target: " + _dist(res.targets))
    if dry_run:
        click.echo("Dry run: roster not modified.")
    else:
        click.echo(f"Saved to {allies.path}")


def _dist(row: dict) -> str:
    return " ".join(f"{k}={v}" for k, v in row.items() if v) or "-"


# --- Runtime ---


@cli.command()
@click.option("--seed", type=int, default=None, help="Seed for quiz generation.")
@click.option("--stage", "stage_id", default=None, help="Stage id shown in the top bar.")
@click.pass_context
def play(ctx: click.Context, seed: Optional[int], stage_id: Optional[str]) -> None:
    """Open the battle host with the spawn gate."""
    from .game import default_deck, run

    settings = get_settings(ctx)
    try:
        deck = default_deck(_allies(settings))
    except ContentError as e:
        raise click.ClickException(str(e))
    run(settings=settings, deck=deck, stage_label=stage_id or "BATTLE", seed=seed)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
