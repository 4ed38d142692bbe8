"""Test configuration and fixtures for formatting tests."""

import pytest

from smartfmt.formatting import DefaultFormattingRules


USER_MODEL_BODY = [
    '  id        String   @id @default(uuid()) @map("id")',
    '  email String @unique',
    '  createdAt DateTime @default(now()) @map("created_at")',
    '  posts Post[]',
    '',
    '  @@index([email, createdAt])',
]

SCHEMA = '''datasource db {
  provider = "postgresql"
  url      = env("DATABASE_URL")
}

model User {
  id String @id
  email String @unique
}

model Post {
  id Int @id @default(autoincrement())
  title String @map("post_title")
  author User @relation(fields: [authorId], references: [id])
  authorId String @map("author_id")
}
'''

TS_SOURCE = '''import Z from 'z'
import { BB } from 'y'
import type { A } from 'x'

import {
  useState,
  useEffect,
  useLayoutEffect,
} from 'react'
import * as path from 'path'

export const value = 1
'''


@pytest.fixture
def options():
    """Standard formatting options."""
    return DefaultFormattingRules.standard()


@pytest.fixture
def user_model_body():
    return list(USER_MODEL_BODY)


@pytest.fixture
def schema():
    return SCHEMA


@pytest.fixture
def ts_source():
    return TS_SOURCE
