"""CLI script to seed a local database with demo departments and accounts.
Usage: python scripts/seed_demo.py [--password PASSWORD]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `campus` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from campus import models, repositories, services
from campus.database import engine, create_db_and_tables
from campus.errors import ApiError
from campus.schemas import RegisterIn

DEPARTMENTS = ["Computer Science", "Electronics", "Mechanical"]


def main(password: str = "demo"):
    """Create demo departments, one staff member and one student.

    Existing rows are left untouched so the script can be re-run.
    Results are printed to stdout for a quick CLI feedback loop.
    """
    create_db_and_tables()
    with Session(engine) as session:
        dep_svc = services.DepartmentService(session)
        for name in DEPARTMENTS:
            try:
                dep_svc.create(name)
                print(f'Created department {name}')
            except ApiError as e:
                print(f'Skipped department {name}: {e.message}')

        if repositories.UserRepository(session).get_by_email('staff@example.edu') is None:
            staff = repositories.StaffRepository(session).create(models.Staff(
                name='Demo Staff', email='staff@example.edu', department=DEPARTMENTS[0], designation='Registrar'))
            services.AuthService(session).register(RegisterIn(
                email='staff@example.edu', password=password, name=staff.name, role='STAFF', user_id=staff.id))
            print(f'Created staff account staff@example.edu (profile {staff.id})')

        if repositories.UserRepository(session).get_by_email('student@example.edu') is None:
            student = repositories.StudentRepository(session).create(
                models.Student(name='Demo Student', email='student@example.edu', enrollment_no='ENR0001',
                               department=DEPARTMENTS[0], batch='2024', semester=1),
                models.StudentDetails(father_name='Demo Parent'),
            )
            services.AuthService(session).register(RegisterIn(
                email='student@example.edu', password=password, name=student.name, role='STUDENT', user_id=student.id))
            print(f'Created student account student@example.edu (profile {student.id})')


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--password', default='demo', help='Password for the demo accounts')
    args = parser.parse_args()
    main(password=args.password)
