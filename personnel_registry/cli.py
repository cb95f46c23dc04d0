"""Interactive console menu for the personnel registry."""

import argparse
import sys
from typing import Callable, List, Optional, TextIO

import structlog

from .config import load_settings
from .config.settings import DEFAULT_CONFIG_PATH
from .core.repository import InMemoryEmployeeRepository, create_repository
from .logging_config import configure_logging
from .models.employee import Ant, Bee, Employee

logger = structlog.get_logger(__name__)

YES_ANSWERS = ("y", "j", "yes", "ja")
NO_ANSWERS = ("n", "no", "nej")


class ConsoleMenu:
    """Menu loop driving an employee repository."""

    def __init__(
        self,
        repository: InMemoryEmployeeRepository,
        input_fn: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        self.repository = repository
        self.input_fn = input_fn or input
        self.output = output or sys.stdout
        self.actions = {
            "1": self.add_ant,
            "2": self.search,
            "3": self.update,
            "4": self.delete,
            "5": self.list_all,
            "6": self.add_bee,
            "7": self.save_snapshot,
            "8": self.load_snapshot,
        }

    def run(self) -> None:
        while True:
            self.show_menu()
            try:
                choice = self.ask("Choice")
            except EOFError:
                break

            if choice == "0":
                self.say("Goodbye.")
                break

            action = self.actions.get(choice)
            if action is None:
                self.say("Invalid choice. Try again.")
                continue
            try:
                action()
            except EOFError:
                break

    def show_menu(self) -> None:
        self.say("")
        self.say("Personnel registry for worker ants (and bees)")
        self.say(f"Last read: {self.repository.get_last_read_time():%Y-%m-%d %H:%M:%S}")
        self.say("-" * 50)
        self.say("1. Add employee (ant)")
        self.say("2. Search employees")
        self.say("3. Update employee")
        self.say("4. Remove employee")
        self.say("5. List all employees")
        self.say("6. Add employee (bee)")
        self.say("7. Save snapshot")
        self.say("8. Load snapshot")
        self.say("0. Quit")

    # --- actions ---

    def add_ant(self) -> None:
        name = self.ask("Name")
        night = self.ask("Works night shift (y/n)").lower() in YES_ANSWERS
        ant = Ant(name=name, works_night_shift=night)
        self.repository.add_employee(ant)
        self.say(f"Added: {ant.name} (ID: {ant.id}).")

    def add_bee(self) -> None:
        name = self.ask("Name")
        wings = self._parse_int(self.ask("Number of wings"))
        bee = Bee(name=name, wings=wings if wings is not None and wings >= 0 else 0)
        self.repository.add_employee(bee)
        self.say(f"Added: {bee.name} (ID: {bee.id}).")

    def search(self) -> None:
        term = self.ask("Name or ID to search for (filters: shift:night, status:inactive)")
        employees = self.repository.search_employees(term)
        if not employees:
            self.say("No employees found.")
            suggestions = self.repository.suggest_names(term)
            if suggestions:
                self.say("Did you mean: " + ", ".join(suggestions))
            return

        self.say("Found:")
        self._print_employees(employees)

    def update(self) -> None:
        employee = self._ask_for_employee("ID of employee to update")
        if employee is None:
            return

        self.say(f"Updating: {self.repository.describe(employee)}")
        name = self.ask(f"New name (blank keeps '{employee.name}')")
        if name:
            employee.name = name

        if employee.kind == "Ant":
            answer = self.ask(
                f"Works night shift (y/n) (current: {employee.works_night_shift})"
            ).lower()
            if answer in YES_ANSWERS:
                employee.works_night_shift = True
            elif answer in NO_ANSWERS:
                employee.works_night_shift = False
        elif employee.kind == "Bee":
            wings = self._parse_int(self.ask(f"Number of wings (current: {employee.wings})"))
            if wings is not None and wings >= 0:
                employee.wings = wings

        self.repository.update_employee(employee)
        self.say("Employee updated.")
        self.say(f"Now: {self.repository.describe(employee)}")

    def delete(self) -> None:
        employee = self._ask_for_employee("ID of employee to remove")
        if employee is None:
            return

        self.say(f"About to remove: {self.repository.describe(employee)}")
        if self.ask("Confirm removal? (y/n)").lower() not in YES_ANSWERS:
            self.say("Removal cancelled.")
            return

        self.repository.delete_employee(employee.id)
        self.say("Employee removed.")

    def list_all(self) -> None:
        employees = self.repository.get_all_employees()
        if not employees:
            self.say("The registry is empty.")
            return

        self.say("--- All employees ---")
        self._print_employees(employees)
        self.say("--- End of list ---")

    def save_snapshot(self) -> None:
        path = self.ask(
            f"Snapshot path (blank for {self.repository.settings.default_snapshot_path})"
        )
        try:
            count = self.repository.save_snapshot(path or None)
        except OSError as e:
            logger.error("snapshot_save_failed", error=str(e))
            self.say(f"Could not save snapshot: {e}")
            return
        self.say(f"Saved {count} employee(s).")

    def load_snapshot(self) -> None:
        path = self.ask(
            f"Snapshot path (blank for {self.repository.settings.default_snapshot_path})"
        )
        result = self.repository.load_snapshot(path or None)
        if not result.found:
            self.say("No snapshot found.")
            return
        self.say(f"Loaded {result.loaded} employee(s), skipped {result.skipped} line(s).")

    # --- helpers ---

    def ask(self, prompt: str) -> str:
        return self.input_fn(f"{prompt}: ").strip()

    def say(self, message: str) -> None:
        self.output.write(message + "\n")

    def _ask_for_employee(self, prompt: str) -> Optional[Employee]:
        employee_id = self._parse_int(self.ask(prompt))
        if employee_id is None:
            self.say("Invalid ID.")
            return None

        employee = self.repository.get_employee_by_id(employee_id)
        if employee is None:
            self.say("Employee not found.")
        return employee

    def _print_employees(self, employees: List[Employee]) -> None:
        for employee in employees:
            self.say(self.repository.describe(employee))

    @staticmethod
    def _parse_int(text: str) -> Optional[int]:
        try:
            return int(text)
        except ValueError:
            return None


def main(argv: Optional[List[str]] = None) -> int:
    """Run the interactive registry."""
    parser = argparse.ArgumentParser(
        prog="personnel-registry",
        description="Personnel registry for worker ants and bees",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_PATH, help="Path to the JSON config file"
    )
    parser.add_argument(
        "--snapshot", default=None, help="Snapshot file (overrides the configured path)"
    )
    args = parser.parse_args(argv)

    config = load_settings(args.config)
    settings = config.settings
    configure_logging(settings.log_level, settings.log_format)
    logger.info("config_loaded", path=config.path, status=config.status)

    repository = create_repository(settings)
    snapshot_path = args.snapshot or settings.default_snapshot_path
    repository.load_snapshot(snapshot_path)

    ConsoleMenu(repository).run()

    try:
        repository.save_snapshot(snapshot_path)
    except OSError as e:
        logger.error("snapshot_save_failed", path=snapshot_path, error=str(e))
        return 1
    return 0
