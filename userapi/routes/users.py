from __future__ import annotations

from sqlite3 import Connection
from typing import List

from fastapi import APIRouter, Depends, Form, HTTPException

from ..db import get_db
from ..logs import LogContext
from ..models import User, UserPatch, UserSummary
from ..services import user_svc

router = APIRouter()


@router.get("/users", response_model=List[UserSummary])
def api_users_list(conn: Connection = Depends(get_db)):
    try:
        return user_svc.list_users(conn)
    except user_svc.UserStorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/create-users", response_model=User, status_code=201)
def api_users_create(
    name: str = Form(""),
    email: str = Form(""),
    age: str = Form(""),
    conn: Connection = Depends(get_db),
):
    log = LogContext(conn, "CREATE_USER")
    log.set_payload({"name": name, "email": email, "age": age})
    try:
        user = user_svc.create_user(conn, name, email, age, log)
        log.write("OK")
        return user
    except ValueError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except user_svc.UserStorageError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/update-user", response_model=User)
def api_users_update(
    user_id: str = Form("", alias="id"),
    name: str = Form(""),
    email: str = Form(""),
    age: str = Form(""),
    conn: Connection = Depends(get_db),
):
    log = LogContext(conn, "UPDATE_USER")
    log.set_payload({"id": user_id, "name": name, "email": email, "age": age})
    try:
        user = user_svc.update_user(conn, user_id, UserPatch(name=name, email=email, age=age), log)
        log.write("OK")
        return user
    except ValueError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except user_svc.UserStorageError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))
