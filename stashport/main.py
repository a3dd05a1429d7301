from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from . import config
from .itineraries.ingest import create_itinerary, delete_itinerary, load_payload, update_itinerary
from .itineraries.query import explore_itineraries, get_public_itinerary
from .models import reset_engine
from .profiles import update_profile
from .sharing.links import share_url
from .sharing.registry import DatabaseSlugRegistry
from .sharing.slug import SlugAllocator, SlugGenerationExhausted, generate_slug

app = typer.Typer(help="Itinerary storage and public share links")


def _use_data_dir(data: Optional[Path]) -> None:
    if data:
        config.set_data_dir(data)
        reset_engine()


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.command()
def slug(
    title: str = typer.Argument(..., help="Title to turn into a slug"),
    reserve: bool = typer.Option(False, "--reserve", help="Reserve a unique slug in the database"),
    data: Optional[Path] = typer.Option(None, "--data", help="Data directory"),
) -> None:
    if not reserve:
        typer.echo(generate_slug(title))
        return
    _use_data_dir(data)
    try:
        typer.echo(SlugAllocator(DatabaseSlugRegistry()).allocate(title))
    except SlugGenerationExhausted as exc:
        _fail(str(exc))


@app.command()
def create(
    payload: Path = typer.Argument(..., help="JSON file describing the itinerary"),
    user: str = typer.Option(..., "--user", help="Owner user id"),
    email: Optional[str] = typer.Option(None, "--email", help="Owner email, creates the profile if missing"),
    data: Optional[Path] = typer.Option(None, "--data", help="Data directory"),
) -> None:
    _use_data_dir(data)
    try:
        itinerary = create_itinerary(load_payload(payload), user, email=email)
    except (FileNotFoundError, ValueError, SlugGenerationExhausted) as exc:
        _fail(str(exc))
        return
    typer.echo(f"Created: {itinerary['slug']}")
    if itinerary["is_public"]:
        typer.echo(share_url(itinerary["slug"]))


@app.command()
def show(
    slug: str = typer.Argument(..., help="Public slug"),
    data: Optional[Path] = typer.Option(None, "--data", help="Data directory"),
) -> None:
    _use_data_dir(data)
    itinerary = get_public_itinerary(slug)
    if itinerary is None:
        _fail("Trip not found")
        return
    typer.echo(json.dumps(itinerary, indent=2))


@app.command()
def explore(
    destination: Optional[str] = typer.Option(None, "--destination", help="Destination substring"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Tag filter, repeatable"),
    type_filter: str = typer.Option("all", "--type", help="daily, guide or all"),
    page: int = typer.Option(1, "--page"),
    limit: int = typer.Option(config.EXPLORE_DEFAULT_LIMIT, "--limit"),
    data: Optional[Path] = typer.Option(None, "--data", help="Data directory"),
) -> None:
    _use_data_dir(data)
    try:
        result = explore_itineraries(
            page=page,
            limit=limit,
            destination=destination,
            tags=tag,
            type_filter=type_filter,
        )
    except ValueError as exc:
        _fail(str(exc))
        return
    for item in result["itineraries"]:
        typer.echo(f"{item['slug']}\t{item['title']}\t{item['day_count']} days")
    pagination = result["pagination"]
    typer.echo(f"Page {pagination['page']} of {pagination['total_pages']} ({pagination['total_count']} total)")


@app.command()
def update(
    itinerary_id: int = typer.Argument(..., help="Itinerary id"),
    payload: Path = typer.Argument(..., help="JSON file with the new details"),
    user: str = typer.Option(..., "--user", help="Owner user id"),
    data: Optional[Path] = typer.Option(None, "--data", help="Data directory"),
) -> None:
    _use_data_dir(data)
    try:
        itinerary = update_itinerary(itinerary_id, load_payload(payload), user)
    except (FileNotFoundError, ValueError, PermissionError) as exc:
        _fail(str(exc))
        return
    typer.echo(f"Updated: {itinerary['slug']}")


@app.command()
def delete(
    itinerary_id: int = typer.Argument(..., help="Itinerary id"),
    user: str = typer.Option(..., "--user", help="Owner user id"),
    data: Optional[Path] = typer.Option(None, "--data", help="Data directory"),
) -> None:
    _use_data_dir(data)
    try:
        delete_itinerary(itinerary_id, user)
    except (ValueError, PermissionError) as exc:
        _fail(str(exc))
        return
    typer.echo(f"Deleted: {itinerary_id}")


@app.command()
def profile(
    user: str = typer.Option(..., "--user", help="User id"),
    display_name: str = typer.Option(..., "--display-name", help="Public name, empty to clear"),
    data: Optional[Path] = typer.Option(None, "--data", help="Data directory"),
) -> None:
    _use_data_dir(data)
    try:
        result = update_profile(user, display_name)
    except ValueError as exc:
        _fail(str(exc))
        return
    typer.echo(f"Display name: {result['display_name'] or '(none)'}")


if __name__ == "__main__":
    app()
