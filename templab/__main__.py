from templab.main import main

raise SystemExit(main())
