import typing as t

import sql_formatter.core
import sqlalchemy.orm
import sqlalchemy.sql


class DebugSession(sqlalchemy.orm.Session):
    """Session used in debug mode; can render statements as formatted SQL with inlined parameters"""

    def format_query(self, q: sqlalchemy.orm.Query[t.Any] | sqlalchemy.sql.Executable) -> str:
        statement = q.statement if isinstance(q, sqlalchemy.orm.Query) else q
        bind = self.get_bind()
        compiled = statement.compile(bind, compile_kwargs={"literal_binds": True})
        return sql_formatter.core.format_sql(str(compiled))


class DebugQuery(sqlalchemy.orm.Query[t.Any]):
    def __str__(self) -> str:
        if isinstance(self.session, DebugSession):
            return self.session.format_query(self)
        return super().__str__()
