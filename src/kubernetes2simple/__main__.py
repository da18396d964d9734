from kubernetes2simple.cli import main

main()
