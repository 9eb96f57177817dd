"""
Command line entry points, one subcommand per operator action.

Usage:

    team-survey init-workbook
    team-survey import-roster students.csv
    team-survey create-form
    team-survey update-form
    team-survey add-test-responses --seed 1
    team-survey generate-results --export results.xlsx

The workbook and form directory default to the TEAM_SURVEY_WORKBOOK and
TEAM_SURVEY_FORMS_DIR environment variables.
"""

import argparse
import sys

from team_survey import operations
from team_survey.errors import SurveyError
from team_survey.session import DEFAULT_WORKBOOK, SurveySession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='team-survey', description='Team formation survey scripts')
    parser.add_argument('--workbook', help=f'Survey workbook (default: {DEFAULT_WORKBOOK})')
    parser.add_argument('--forms-dir', help='Directory the forms are stored in')
    parser.add_argument('--quiet', action='store_true', help='Only print results and errors')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('init-workbook', help='Create a new survey workbook')
    roster = subparsers.add_parser('import-roster', help='Replace the roster with a CSV or Excel file')
    roster.add_argument('path')
    subparsers.add_parser('create-form', help='Create a new, empty form')
    subparsers.add_parser('update-form', help='Rebuild every question of the form')
    subparsers.add_parser('delete-form', help='Delete the form and its responses')
    subparsers.add_parser('clear-form', help='Remove every question from the form')
    results = subparsers.add_parser('generate-results', help='Compile the responses into a results sheet')
    results.add_argument('--export', help='Also write the results to this .xlsx or .csv file')
    single = subparsers.add_parser('add-test-response', help='Submit a test response for one student')
    single.add_argument('student_id')
    single.add_argument('--seed', type=int)
    every = subparsers.add_parser('add-test-responses', help='Submit a test response for every student')
    every.add_argument('--seed', type=int)
    subparsers.add_parser('clear-responses', help='Permanently delete every response')
    subparsers.add_parser('add-proficiency-row', help='Add a row to the proficiency questions')
    subparsers.add_parser('remove-proficiency-row', help='Remove a row from the proficiency questions')
    return parser


def run(args) -> str:
    verbose = not args.quiet
    if args.command == 'init-workbook':
        path = operations.init_workbook(args.workbook or DEFAULT_WORKBOOK, verbose=verbose)
        return f'Created {path}'

    session = SurveySession.open(args.workbook, args.forms_dir, verbose=verbose)
    if args.command == 'import-roster':
        return f'Imported {operations.import_roster(session, args.path)} students'
    if args.command == 'create-form':
        return f'Created form {operations.create_form(session)}'
    if args.command == 'update-form':
        return f'Form rebuilt with {operations.update_form(session)} items'
    if args.command == 'delete-form':
        operations.delete_form(session)
        return 'Form deleted'
    if args.command == 'clear-form':
        return f'Removed {operations.clear_form(session)} items'
    if args.command == 'generate-results':
        return f"Results written to '{operations.generate_results(session, args.export)}'"
    if args.command == 'add-test-response':
        submitted = operations.add_test_response(session, args.student_id, seed=args.seed)
        return f"Submitted a test response for {submitted['id']}"
    if args.command == 'add-test-responses':
        return f'Submitted {len(operations.add_test_responses(session, seed=args.seed))} test responses'
    if args.command == 'clear-responses':
        return f'Deleted {operations.permanently_clear_responses(session)} responses'
    if args.command == 'add-proficiency-row':
        operations.add_row_to_proficiency_questions(session)
        return 'Added a proficiency question row'
    if args.command == 'remove-proficiency-row':
        operations.remove_row_from_proficiency_questions(session)
        return 'Removed a proficiency question row'
    raise ValueError(f'Unknown command: {args.command}')


def main(argv=None) -> int:
    """Main entry point for standalone execution."""
    args = build_parser().parse_args(argv)
    try:
        print(run(args))
    except (SurveyError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
