from kuna_client.cli import main

raise SystemExit(main())
