"""Database schema DDL — table definitions for the inventory store.

Tables are listed in foreign-key order: a table appears only after every
table it references.
"""

USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id          TEXT PRIMARY KEY,
    email       TEXT UNIQUE NOT NULL,
    password    TEXT NOT NULL,
    name        TEXT NOT NULL,
    role        TEXT NOT NULL
                CHECK(role IN ('admin','manager','salesgirl'))
)
"""

PRODUCTS_DDL = """
CREATE TABLE IF NOT EXISTS products (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    sku             TEXT UNIQUE NOT NULL,
    quantity        INTEGER NOT NULL,
    reorderLevel    INTEGER NOT NULL,
    price           REAL NOT NULL,
    cost            REAL NOT NULL,
    category        TEXT NOT NULL
)
"""

SALES_DDL = """
CREATE TABLE IF NOT EXISTS sales (
    id              TEXT PRIMARY KEY,
    productId       TEXT NOT NULL,
    quantity        INTEGER NOT NULL,
    price           REAL NOT NULL,
    total           REAL NOT NULL,
    date            TEXT NOT NULL,
    salesPersonId   TEXT NOT NULL,
    paymentMode     TEXT NOT NULL
                    CHECK(paymentMode IN ('POS','transfer','cash')),
    FOREIGN KEY (productId) REFERENCES products(id),
    FOREIGN KEY (salesPersonId) REFERENCES users(id)
)
"""

EXPENSES_DDL = """
CREATE TABLE IF NOT EXISTS expenses (
    id          TEXT PRIMARY KEY,
    description TEXT NOT NULL,
    amount      REAL NOT NULL,
    category    TEXT NOT NULL,
    date        TEXT NOT NULL,
    createdBy   TEXT NOT NULL,
    FOREIGN KEY (createdBy) REFERENCES users(id)
)
"""

INDEXES_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_sales_product ON sales(productId)",
    "CREATE INDEX IF NOT EXISTS idx_sales_person ON sales(salesPersonId)",
    "CREATE INDEX IF NOT EXISTS idx_expenses_category ON expenses(category)",
)

SCHEMA_DDL: tuple[tuple[str, str], ...] = (
    ("users", USERS_DDL),
    ("products", PRODUCTS_DDL),
    ("sales", SALES_DDL),
    ("expenses", EXPENSES_DDL),
)

TABLE_NAMES = tuple(name for name, _ in SCHEMA_DDL)
