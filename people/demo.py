"""Sequential CRUD walkthrough against the Person collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional

from people.core.exceptions import OperationError
from people.models.person import PersonDraft
from people.repositories.person import PersonRepository

logger = logging.getLogger(__name__)

JOHN = PersonDraft(name="John", age=30, favorite_foods=["Pizza", "Burger"])
PEOPLE = [
    PersonDraft(name="Alice", age=25, favorite_foods=["Sushi", "Pasta"]),
    PersonDraft(name="Bob", age=35, favorite_foods=["Steak", "Salad"]),
]


@dataclass
class DemoStep:
    label: str
    succeeded: bool
    result: Any = None
    error: Optional[str] = None


@dataclass
class DemoReport:
    steps: List[DemoStep] = field(default_factory=list)

    @property
    def failures(self) -> List[DemoStep]:
        return [step for step in self.steps if not step.succeeded]


class DemoPipeline:
    """Issue each repository operation once, awaiting each before the next.

    Steps that address a record by id use `person_id` when given, otherwise
    the id assigned to the first inserted person. An `OperationError` is
    logged and recorded and the pipeline moves on; `StorageConnectionError`
    propagates and ends the run.
    """

    def __init__(self, repository: PersonRepository, *, person_id: Optional[str] = None) -> None:
        self.repository = repository
        self.person_id = person_id

    async def run(self) -> DemoReport:
        report = DemoReport()
        repo = self.repository

        john = await self._step(report, "Person saved", "saving person", repo.insert_one, JOHN)
        await self._step(report, "Multiple people saved", "saving multiple people", repo.insert_many, PEOPLE)
        await self._step(report, "People found by name", "finding people by name", repo.find_by_name, "John")
        await self._step(
            report, "Person found by food", "finding person by food", repo.find_one_by_favorite_food, "Pizza"
        )

        target = self.person_id or (john.id if john is not None else None)
        await self._id_step(report, "Person found by ID", "finding person by ID", repo.find_by_id, target)
        await self._id_step(report, "Person updated", "updating person", repo.edit_then_save, target)

        await self._step(report, "Person updated by name", "updating person by name", repo.find_and_update, "John")
        await self._id_step(report, "Person removed", "removing person by ID", repo.remove_by_id, target)
        await self._step(
            report, "People named Mary removed", "removing people named Mary", repo.remove_by_name, "Mary"
        )
        await self._step(
            report,
            "People who like burritos",
            "searching for people who like burritos",
            repo.query_chain,
            "burritos",
        )

        logger.info("Demo finished: %d steps, %d failed", len(report.steps), len(report.failures))
        return report

    async def _id_step(
        self,
        report: DemoReport,
        label: str,
        action: str,
        operation: Callable[..., Awaitable[Any]],
        target: Optional[str],
    ) -> Any:
        if target is None:
            logger.warning("Skipping '%s': no person id available", label)
            report.steps.append(DemoStep(label=label, succeeded=False, error="no person id available"))
            return None
        return await self._step(report, label, action, operation, target)

    async def _step(
        self,
        report: DemoReport,
        label: str,
        action: str,
        operation: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> Any:
        try:
            result = await operation(*args)
        except OperationError as exc:
            logger.error("Error %s: %s", action, exc)
            report.steps.append(DemoStep(label=label, succeeded=False, error=str(exc)))
            return None

        logger.info("%s: %s", label, result)
        report.steps.append(DemoStep(label=label, succeeded=True, result=result))
        return result


async def run_demo(repository: PersonRepository, *, person_id: Optional[str] = None) -> DemoReport:
    return await DemoPipeline(repository, person_id=person_id).run()
