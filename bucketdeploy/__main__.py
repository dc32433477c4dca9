from bucketdeploy.cli import main

raise SystemExit(main())
