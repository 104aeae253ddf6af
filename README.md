# hotelbooking

A small HTTP service that keeps a register of clients and their hotel
bookings. For each booking it opens an invoice with an external payment
service, then marks the booking as paid once that service reports the
invoice as fulfilled.

## Installation

```
pip install .
```

The service stores its data in PostgreSQL through SQLAlchemy. A PostgreSQL
driver is not among the package's dependencies. Install SQLAlchemy's default
one (`psycopg2`) yourself before you start the service.

To run the tests, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Configuration

The service reads a JSON file named by the `BOOKING_CONFIG_PATH`
environment variable:

```json
{
  "db": {
    "host": "localhost",
    "port": "5432",
    "name": "booking",
    "user": "user",
    "password": "password"
  },
  "payment": {
    "url": "http://localhost:9090"
  }
}
```

How the file is read:

- Keys are matched without regard to case.
- A missing value becomes an empty string.
- A value of the wrong type (for example a number where a string belongs) raises `ValueError`.
- The port is given as a string.
- The connection is opened with `sslmode=disable`.

`hotelbooking.config.load_config(path)` reads a given file.
`hotelbooking.config.init_config()` reads the file named by the environment
variable. Both return a frozen `Config` holding a `DBConfig` and a
`PaymentConfig`.

## Running

```
BOOKING_CONFIG_PATH=/path/to/config.json hotelbooking
```

On start-up the service:

1. Loads the configuration.
2. Creates the `client`, `booking` and `payment` tables if they do not exist yet. If this migration fails, the failure is logged and start-up carries on.
3. Starts Flask's built-in server on `0.0.0.0:8080`.

Log records go to standard output as JSON lines, with the fields `level`,
`msg` and `time`, at INFO level and above. The command takes no options
apart from `--help`.

## Endpoints

| Method | Path            | Purpose                                               |
|--------|-----------------|-------------------------------------------------------|
| GET    | `/client`       | List all clients, ordered by id                       |
| POST   | `/client`       | Create a client: `{"fullName": "..."}`, answers 202   |
| GET    | `/booking`      | List all bookings with their client and paid flag     |
| POST   | `/booking`      | Book a hotel (see below), answers 200 with empty body |
| GET    | `/booking/<id>` | Fetch one booking                                     |

A booking request looks like this:

```json
{"hotelName": "Grand Hotel", "price": "120.00", "currency": "EUR", "clientId": 1}
```

When a booking request arrives, the service:

1. Checks that the client exists. If it does not, the request answers 400.
2. Stores the booking.
3. Creates a payment in state `CREATED`.
4. Posts an invoice to `<payment url>/payment`, using the payment id as the reference. The payment service must answer 202.
5. Starts a background thread that polls `<payment url>/payment/<reference>` once a second. The thread keeps polling after errors, and stops once the invoice's `status` is `FULFILLED`. It then records the payment as `FULFILLED`.

A booking as the service returns it:

```json
{
  "id": 1,
  "hotelName": "Grand Hotel",
  "price": "120.00",
  "currency": "EUR",
  "client": {"id": 1, "fullName": "Jane Doe"},
  "paid": false
}
```

Response bodies are compact JSON, sent as `text/plain`. The characters `<`,
`>` and `&` inside strings are escaped as `\u003c`, `\u003e` and `\u0026`.

Error responses:

- An unsupported method answers 405 with `Method not allowed!`.
- A malformed body or a non-integer id answers 400 with `Bad request!`.
- A failure while talking to the database or the payment service answers 500 with `Internal server error!`. This includes looking up a booking id that does not exist.

## Using it from Python

- `hotelbooking.app.build_app(config)` builds the Flask application from a loaded `Config`.
- `hotelbooking.api.create_app(db, payment, poll_interval=1.0)` builds it directly from:
  - a `hotelbooking.db.BookingDb`, which wraps any SQLAlchemy engine; call `migrate()` to create the tables;
  - a `hotelbooking.payment.PaymentClient`.

  This is handy for embedding or for tests against SQLite.
- `hotelbooking.models` holds the request and response bodies together with `parse_book` and `parse_create_client`.
- `hotelbooking.payment.PaymentClient` raises `PaymentError` when the payment service cannot be reached or answers unexpectedly.
- `BookingDb` raises `NotFoundError` for missing records.
- `hotelbooking.logsetup.setup_logger(stream=None)` installs the JSON log format.

## What it does not do

- The payment state is tracked only by the background polling threads. Those threads live in the server process. If the server restarts, no thread resumes polling for bookings that were still unpaid.
- The service has no authentication.
- There is no way to change or delete clients or bookings.
- The command starts Flask's development server only.