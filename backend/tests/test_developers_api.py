from fastapi.testclient import TestClient

from devtracker import models
from devtracker.main import app

client = TestClient(app)


def _create_developer(name="Ana", email="ana@x.com"):
    r = client.post('/developers', json={'name': name, 'email': email})
    assert r.status_code == 201
    return r.json()


def _create_info(developer_id, since='2018-03-01', os_name='Linux'):
    r = client.post(f'/developers/{developer_id}/infos', json={'developerSince': since, 'preferredOS': os_name})
    assert r.status_code == 201
    return r.json()


def test_create_developer_returns_generated_id():
    dev = _create_developer()
    assert dev['id'] == 1
    assert dev == {'id': 1, 'name': 'Ana', 'email': 'ana@x.com', 'developerInfosId': None}


def test_duplicate_email_conflicts_and_persists_nothing():
    _create_developer()
    r = client.post('/developers', json={'name': 'Other Ana', 'email': 'ana@x.com'})
    assert r.status_code == 409
    assert r.json() == {'message': 'Email already exists.'}
    assert len(client.get('/developers').json()) == 1


def test_missing_email_is_rejected_before_lookup():
    r = client.post('/developers', json={'name': 'Ana'})
    assert r.status_code == 400
    assert r.json()['message'] == 'Email is required.'
    assert client.get('/developers').json() == []


def test_missing_name_is_a_validation_error():
    r = client.post('/developers', json={'email': 'ana@x.com'})
    assert r.status_code == 400
    body = r.json()
    assert body['message'] == 'Required keys are: name, email'
    assert body['keys'] == ['name', 'email']
    assert client.get('/developers').json() == []


def test_non_object_body_is_bad_request():
    r = client.post('/developers', json=['name', 'email'])
    assert r.status_code == 400
    assert 'message' in r.json()


def test_list_and_read_join_info_columns():
    dev = _create_developer()
    info = _create_info(dev['id'])
    rows = client.get('/developers').json()
    assert rows == [{
        'developerID': dev['id'],
        'developerName': 'Ana',
        'developerEmail': 'ana@x.com',
        'developerInfoID': info['id'],
        'developerInfoDeveloperSince': '2018-03-01',
        'developerInfoPreferredOS': 'Linux',
    }]
    single = client.get(f"/developers/{dev['id']}")
    assert single.status_code == 200
    assert single.json() == rows[0]


def test_developer_without_info_has_null_info_columns():
    dev = _create_developer()
    row = client.get(f"/developers/{dev['id']}").json()
    assert row['developerInfoID'] is None
    assert row['developerInfoPreferredOS'] is None


def test_unknown_developer_is_not_found():
    for method, path in (('get', '/developers/42'), ('get', '/developers/42/projects'),
                         ('delete', '/developers/42')):
        r = getattr(client, method)(path)
        assert r.status_code == 404
        assert r.json() == {'message': 'Developer not found.'}
    r = client.patch('/developers/42', json={'name': 'x'})
    assert r.status_code == 404


def test_patch_single_field_preserves_others():
    dev = _create_developer()
    r = client.patch(f"/developers/{dev['id']}", json={'name': 'Ana Maria'})
    assert r.status_code == 200
    assert r.json() == {'id': dev['id'], 'name': 'Ana Maria', 'email': 'ana@x.com', 'developerInfosId': None}


def test_patch_rejects_id_and_empty_payload():
    dev = _create_developer()
    r = client.patch(f"/developers/{dev['id']}", json={'id': 9, 'name': 'x'})
    assert r.status_code == 400
    assert r.json() == {'message': 'Id is not editable.'}
    r = client.patch(f"/developers/{dev['id']}", json={'nickname': 'x'})
    assert r.status_code == 400
    assert r.json() == {'message': 'At least one of those keys must be sent.', 'keys': ['name', 'email']}


def test_patch_to_taken_email_conflicts():
    _create_developer()
    other = _create_developer('Bo', 'bo@x.com')
    r = client.patch(f"/developers/{other['id']}", json={'email': 'ana@x.com'})
    assert r.status_code == 409
    assert client.get(f"/developers/{other['id']}").json()['developerEmail'] == 'bo@x.com'


def test_create_info_links_developer():
    dev = _create_developer()
    info = _create_info(dev['id'], os_name='MacOS')
    assert info == {'id': 1, 'developerSince': '2018-03-01', 'preferredOS': 'MacOS'}
    r = client.patch(f"/developers/{dev['id']}", json={'name': 'Ana'})
    assert r.json()['developerInfosId'] == info['id']


def test_create_info_validation_and_duplicates():
    dev = _create_developer()
    r = client.post(f"/developers/{dev['id']}/infos", json={'preferredOS': 'Linux'})
    assert r.status_code == 400
    assert r.json()['keys'] == ['developerSince', 'preferredOS']
    _create_info(dev['id'])
    r = client.post(f"/developers/{dev['id']}/infos", json={'developerSince': '2020-01-01', 'preferredOS': 'Windows'})
    assert r.status_code == 409
    r = client.post('/developers/77/infos', json={'developerSince': '2020-01-01', 'preferredOS': 'Windows'})
    assert r.status_code == 404


def test_patch_info_merges_and_requires_existing_info():
    dev = _create_developer()
    r = client.patch(f"/developers/{dev['id']}/infos", json={'preferredOS': 'Windows'})
    assert r.status_code == 404
    assert r.json() == {'message': 'Developer info not found.'}
    info = _create_info(dev['id'])
    r = client.patch(f"/developers/{dev['id']}/infos", json={'preferredOS': 'Windows'})
    assert r.status_code == 200
    assert r.json() == {'id': info['id'], 'developerSince': '2018-03-01', 'preferredOS': 'Windows'}
    r = client.patch(f"/developers/{dev['id']}/infos", json={})
    assert r.status_code == 400
    assert r.json()['keys'] == ['developerSince', 'preferredOS']
    r = client.patch(f"/developers/{dev['id']}/infos", json={'id': 9, 'preferredOS': 'Mac'})
    assert r.status_code == 400
    assert r.json() == {'message': 'Id is not editable.'}
    assert client.get(f"/developers/{dev['id']}").json()['developerInfoPreferredOS'] == 'Windows'


def test_delete_removes_info_then_developer(session):
    dev = _create_developer()
    info = _create_info(dev['id'])
    r = client.delete(f"/developers/{dev['id']}")
    assert r.status_code == 204
    assert r.content == b''
    assert session.get(models.DeveloperInfo, info['id']) is None
    assert session.get(models.Developer, dev['id']) is None
    assert client.get(f"/developers/{dev['id']}").status_code == 404
    assert client.delete(f"/developers/{dev['id']}").status_code == 404


def test_developer_projects_without_projects_yields_empty_list():
    dev = _create_developer()
    r = client.get(f"/developers/{dev['id']}/projects")
    assert r.status_code == 200
    body = r.json()
    assert body['developerID'] == dev['id']
    assert body['developerName'] == 'Ana'
    assert body['projects'] == []
    assert client.get('/developers/77/projects').status_code == 404


def test_out_of_range_developer_id_is_not_found():
    r = client.get('/developers/99999999999999999999')
    assert r.status_code == 404
    assert r.json() == {'message': 'Developer not found.'}
    assert client.get('/developers/99999999999999999999/projects').status_code == 404
    assert client.patch('/developers/99999999999999999999', json={'name': 'x'}).status_code == 404


def test_request_id_header_exists():
    r = client.get('/health')
    assert r.status_code == 200
    assert 'X-Request-ID' in r.headers
    r = client.get('/health', headers={'X-Request-ID': 'abc123'})
    assert r.headers['X-Request-ID'] == 'abc123'
