from conftest import join, register, user_id


def test_create_family_makes_creator_head(client, head, family):
    assert family["surname"] == "Bianchi"
    assert len(family["invite_code"]) == 8
    [member] = family["members"]
    assert member["role"] == "HEAD"
    assert member["first_name"] == "Anna"


def test_cannot_create_second_family(client, head, family):
    r = client.post("/families/", json={"surname": "Altra"}, headers=head)
    assert r.status_code == 409


def test_join_with_code_is_forgiving(client, family):
    headers = register(client, "joiner@example.com")
    r = client.post("/families/join", json={"invite_code": family["invite_code"].lower()}, headers=headers)
    assert r.status_code == 200
    assert r.json()["role"] == "MEMBER"
    assert r.json()["family_id"] == family["id"]


def test_join_unknown_code(client, family):
    headers = register(client, "lost@example.com")
    r = client.post("/families/join", json={"invite_code": "ZZZZZZZZ"}, headers=headers)
    assert r.status_code == 404


def test_join_code_must_have_eight_chars(client, family):
    headers = register(client, "short@example.com")
    r = client.post("/families/join", json={"invite_code": "ABC"}, headers=headers)
    assert r.status_code == 422


def test_join_twice_conflicts(client, family, member):
    r = client.post("/families/join", json={"invite_code": family["invite_code"]}, headers=member)
    assert r.status_code == 409


def test_get_family_requires_membership(client, family):
    outsider = register(client, "outsider@example.com")
    assert client.get(f"/families/{family['id']}", headers=outsider).status_code == 403


def test_get_missing_family(client, head):
    assert client.get("/families/does-not-exist", headers=head).status_code == 404


def test_my_families(client, head, family):
    r = client.get("/families/my", headers=head)
    assert [f["id"] for f in r.json()] == [family["id"]]


def test_change_role(client, head, family, member):
    member_id = user_id(client, member)
    r = client.patch(f"/families/{family['id']}/members/{member_id}", json={"role": "WORKER"}, headers=head)
    assert r.status_code == 200
    assert r.json()["role"] == "WORKER"


def test_change_role_refusals(client, head, family, member):
    fid = family["id"]
    head_id = user_id(client, head)
    member_id = user_id(client, member)

    r = client.patch(f"/families/{fid}/members/{head_id}", json={"role": "MEMBER"}, headers=member)
    assert r.status_code == 403
    r = client.patch(f"/families/{fid}/members/{head_id}", json={"role": "MEMBER"}, headers=head)
    assert r.status_code == 400
    r = client.patch(f"/families/{fid}/members/nobody", json={"role": "MEMBER"}, headers=head)
    assert r.status_code == 404
    r = client.patch(f"/families/{fid}/members/{member_id}", json={"role": "BOSS"}, headers=head)
    assert r.status_code == 422


def test_member_can_leave(client, head, family, member):
    r = client.delete(f"/families/{family['id']}/members/{user_id(client, member)}", headers=member)
    assert r.status_code == 200
    assert client.get("/users/me", headers=member).json()["families"] == []


def test_member_cannot_remove_others(client, head, family, member):
    other = join(client, family, "other@example.com")
    r = client.delete(f"/families/{family['id']}/members/{user_id(client, other)}", headers=member)
    assert r.status_code == 403


def test_head_removes_member(client, head, family, member):
    r = client.delete(f"/families/{family['id']}/members/{user_id(client, member)}", headers=head)
    assert r.status_code == 200
    assert len(client.get(f"/families/{family['id']}", headers=head).json()["members"]) == 1


def test_head_cannot_leave_with_members(client, head, family, member):
    r = client.delete(f"/families/{family['id']}/members/{user_id(client, head)}", headers=head)
    assert r.status_code == 409


def test_last_member_leaving_deletes_family(client, head, family):
    r = client.delete(f"/families/{family['id']}/members/{user_id(client, head)}", headers=head)
    assert r.status_code == 200
    assert "deleted" in r.json()["message"]
    assert client.get(f"/families/{family['id']}", headers=head).status_code == 404


def test_delete_family(client, head, family, member):
    assert client.delete(f"/families/{family['id']}", headers=member).status_code == 403
    assert client.delete(f"/families/{family['id']}", headers=head).status_code == 409

    client.delete(f"/families/{family['id']}/members/{user_id(client, member)}", headers=member)
    assert client.delete(f"/families/{family['id']}", headers=head).status_code == 204


def test_regenerate_invite_code(client, head, family, member):
    assert client.post(f"/families/{family['id']}/invite-code", headers=member).status_code == 403

    r = client.post(f"/families/{family['id']}/invite-code", headers=head)
    assert r.status_code == 200
    new_code = r.json()["invite_code"]
    assert len(new_code) == 8

    late = register(client, "late@example.com")
    assert client.post("/families/join", json={"invite_code": family["invite_code"]}, headers=late).status_code == 404
    assert client.post("/families/join", json={"invite_code": new_code}, headers=late).status_code == 200
