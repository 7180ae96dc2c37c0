from fastapi.testclient import TestClient
from sqlmodel import select

from campus import models, repositories
from campus.main import app


def test_get_profile_by_account_id(client, make_student, make_account):
    student = make_student(name='Asha', enrollment_no='ENR100', batch='2024', semester=3)
    account = make_account('asha@example.edu', role='STUDENT', profile_id=student.id)
    r = client.get(f'/api/student/profile/{account.id}')
    assert r.status_code == 200
    body = r.json()
    assert body['message'] == 'Profile fetched successfully'
    data = body['data']
    assert data['id'] == student.id
    assert data['enrollmentNo'] == 'ENR100'
    assert data['semester'] == 3
    assert data['details']['fatherName'] == 'Parent'


def test_get_profile_unknown_account_is_404(client):
    r = client.get('/api/student/profile/nobody')
    assert r.status_code == 404
    assert r.json() == {'status': 404, 'message': 'User profile not found'}


def test_get_profile_account_without_student_is_404(client, make_account):
    account = make_account('staff@example.edu', role='STAFF')
    r = client.get(f'/api/student/profile/{account.id}')
    assert r.status_code == 404


def test_patch_refuses_email_even_with_valid_fields(client, db, make_student):
    student = make_student(name='Ravi')
    r = client.patch(f'/api/student/profile/{student.id}', json={'name': 'Ravi K', 'email': 'new@example.edu'})
    assert r.status_code == 400
    assert r.json()['message'] == 'Email cannot be updated'
    db.expire_all()
    assert repositories.StudentRepository(db).get(student.id).name == 'Ravi'


def test_patch_refuses_enrollment_number(client, make_student):
    student = make_student()
    r = client.patch(f'/api/student/profile/{student.id}', json={'semester': 4, 'enrollmentNo': 'HACK'})
    assert r.status_code == 400
    assert r.json()['message'] == 'Enrollment Number cannot be updated'


def test_patch_requires_data(client, make_student):
    student = make_student()
    r = client.patch(f'/api/student/profile/{student.id}', json={})
    assert r.status_code == 400
    assert r.json()['message'] == 'Data is required'


def test_patch_rejects_unknown_fields(client, make_student):
    student = make_student()
    r = client.patch(f'/api/student/profile/{student.id}', json={'favouriteColour': 'blue'})
    assert r.status_code == 400
    assert r.json()['status'] == 400


def test_patch_unknown_student_is_404(client):
    r = client.patch('/api/student/profile/ghost', json={'name': 'Nobody'})
    assert r.status_code == 404
    assert r.json()['message'] == 'Student not found'


def test_patch_updates_details_student_and_linked_account(client, db, make_student, make_account):
    student = make_student(name='Meena', enrollment_no='ENR200')
    account = make_account('meena@example.edu', role='STUDENT', profile_id=student.id, name='Meena')
    r = client.patch(
        f'/api/student/profile/{student.id}',
        json={'name': 'Meena R', 'phone': '555-0101', 'details': {'address': '9 Hostel Lane', 'bloodGroup': 'O+'}},
    )
    assert r.status_code == 200
    data = r.json()['data']
    assert data['name'] == 'Meena R'
    assert data['phone'] == '555-0101'
    assert data['details']['address'] == '9 Hostel Lane'
    assert data['details']['fatherName'] == 'Parent'
    db.expire_all()
    assert db.get(models.User, account.id).name == 'Meena R'
    assert db.get(models.StudentDetails, student.student_details_id).blood_group == 'O+'


def test_patch_details_without_details_row_is_404(client, db, make_student):
    student = make_student(name='Solo', with_details=False)
    r = client.patch(f'/api/student/profile/{student.id}', json={'name': 'Solo B', 'details': {'address': 'x'}})
    assert r.status_code == 404
    assert r.json()['message'] == 'Student details not found'
    db.expire_all()
    assert db.get(models.Student, student.id).name == 'Solo'


def test_patch_failure_midway_leaves_profile_untouched(client, db, make_student, monkeypatch):
    student = make_student(name='Kiran', enrollment_no='ENR300')

    def boom(self, profile_id):
        raise RuntimeError('account store unavailable')

    monkeypatch.setattr(repositories.UserRepository, 'list_linked_to', boom)
    safe_client = TestClient(app, raise_server_exceptions=False)
    r = safe_client.patch(f'/api/student/profile/{student.id}',
                          json={'name': 'Kiran S', 'details': {'address': 'New Block'}})
    assert r.status_code == 500
    assert r.json() == {'status': 500, 'message': 'account store unavailable'}
    db.expire_all()
    assert db.get(models.Student, student.id).name == 'Kiran'
    assert db.get(models.StudentDetails, student.student_details_id).address == '1 Campus Road'


def test_delete_profile_removes_student_and_details(client, db, make_student):
    student = make_student(enrollment_no='ENR400')
    details_id = student.student_details_id
    r = client.delete(f'/api/student/profile/{student.id}')
    assert r.status_code == 200
    assert r.json() == {'status': 200, 'message': 'Profile deleted successfully', 'data': None}
    db.expire_all()
    assert db.get(models.Student, student.id) is None
    assert db.get(models.StudentDetails, details_id) is None
    assert db.exec(select(models.Student)).all() == []


def test_delete_unknown_profile_is_404(client):
    r = client.delete('/api/student/profile/ghost')
    assert r.status_code == 404
    assert r.json()['message'] == 'Student not found'
